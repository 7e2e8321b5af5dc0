"""
Tokenizer for the experiment cookie value.

The value is a list of ``&``-separated chunks, each a list of
``,``-separated ``key=value`` tokens. The ``u`` token carries the user id;
every other token of a chunk belongs to that chunk's per-app record.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..exceptions import MalformedRecordError

USER_KEY = "u"
APP_KEY = "a"
STAMP_KEY = "s"
BITS_KEY = "v"
BUCKET_KEY = "b"
VERSION_KEY = "w"
PAIRS_KEY = "f"

RECORD_SEPARATOR = "&"
TOKEN_SEPARATOR = ","
KEY_VALUE_SEPARATOR = "="


@dataclass
class RawRecord:
    """One per-app record as found on the wire."""

    fields: Dict[str, str] = field(default_factory=dict)
    tokens: List[str] = field(default_factory=list)

    @property
    def raw(self) -> str:
        return TOKEN_SEPARATOR.join(self.tokens)

    @property
    def app_name(self) -> str:
        return self.fields[APP_KEY]

    def require(self, key: str) -> str:
        if key not in self.fields:
            raise MalformedRecordError(f"Record {self.raw!r} is missing '{key}='")
        return self.fields[key]


def has_user_marker(raw_value: str) -> bool:
    """Check whether any token of the value is a ``u=`` token."""
    for chunk in raw_value.split(RECORD_SEPARATOR):
        for token in chunk.split(TOKEN_SEPARATOR):
            if token.startswith(USER_KEY + KEY_VALUE_SEPARATOR):
                return True
    return False


def _split_token(token: str) -> Tuple[str, str]:
    if KEY_VALUE_SEPARATOR not in token:
        raise MalformedRecordError(f"Token {token!r} is not a key=value pair")
    key, value = token.split(KEY_VALUE_SEPARATOR, 1)
    if not key:
        raise MalformedRecordError(f"Token {token!r} has an empty key")
    return key, value


def find_user_id(raw_value: str) -> str:
    """Return the first ``u=`` value, tolerating malformed neighbours."""
    for chunk in raw_value.split(RECORD_SEPARATOR):
        for token in chunk.split(TOKEN_SEPARATOR):
            if token.startswith(USER_KEY + KEY_VALUE_SEPARATOR):
                return token[len(USER_KEY) + 1:]
    return ""


def tokenize(raw_value: str) -> Tuple[Optional[str], List[RawRecord]]:
    """
    Split a cookie value into its user id and raw per-app records.

    Args:
        raw_value: The cookie value

    Returns:
        Tuple of (user_id or None, records in wire order)

    Raises:
        MalformedRecordError: On any token or record that cannot be parsed
    """
    user_id: Optional[str] = None
    records: List[RawRecord] = []
    seen_apps = set()

    for chunk in raw_value.split(RECORD_SEPARATOR):
        if not chunk:
            continue

        record = RawRecord()
        for token in chunk.split(TOKEN_SEPARATOR):
            key, value = _split_token(token)
            if key == USER_KEY:
                if user_id is not None:
                    raise MalformedRecordError("Duplicate user id token")
                user_id = value
                continue
            if key in record.fields:
                raise MalformedRecordError(f"Duplicate '{key}=' in record {chunk!r}")
            record.fields[key] = value
            record.tokens.append(token)

        if not record.tokens:
            continue

        app_name = record.require(APP_KEY)
        if not app_name:
            raise MalformedRecordError(f"Record {chunk!r} has an empty app name")
        if app_name in seen_apps:
            raise MalformedRecordError(f"Duplicate record for app {app_name!r}")
        seen_apps.add(app_name)
        records.append(record)

    return user_id, records
