"""
Conversion between the experiment cookie value and GlobalExperimentState.

Decoding never raises: malformed input degrades to an empty app map and
records of apps without a registered template are kept opaque.
"""

import logging
from typing import List, Optional

from ..constants import SUPPORTED_WIRE_VERSIONS, WIRE_VERSION_NAMED, WIRE_VERSION_POSITIONAL
from ..exceptions import MalformedRecordError
from ..models import AppEntry, AppExperiments, GlobalExperimentState, OpaqueAppRecord
from ..template_registry import TemplateRegistry
from .named import decode_pairs, encode_pairs
from .positional import decode_bits, encode_bits
from .record_parser import (
    APP_KEY,
    BITS_KEY,
    BUCKET_KEY,
    KEY_VALUE_SEPARATOR,
    PAIRS_KEY,
    RECORD_SEPARATOR,
    STAMP_KEY,
    TOKEN_SEPARATOR,
    USER_KEY,
    VERSION_KEY,
    RawRecord,
    find_user_id,
    has_user_marker,
    tokenize,
)

logger = logging.getLogger(__name__)


def _record_version(record: RawRecord) -> int:
    version = record.fields.get(VERSION_KEY)
    if version is None:
        return WIRE_VERSION_POSITIONAL
    if version not in {str(supported) for supported in SUPPORTED_WIRE_VERSIONS}:
        raise MalformedRecordError(f"Unsupported wire version {version!r}")
    return int(version)


def _decode_record(record: RawRecord, templates: TemplateRegistry) -> AppEntry:
    app_name = record.app_name
    stamp = record.require(STAMP_KEY)
    bucket = record.require(BUCKET_KEY)
    version = _record_version(record)

    if version == WIRE_VERSION_POSITIONAL:
        bits = record.require(BITS_KEY)
    else:
        pairs = record.require(PAIRS_KEY)

    if not templates.has_template(app_name):
        logger.debug(f"No template registered for {app_name}, keeping record opaque")
        return OpaqueAppRecord(app_name=app_name, raw=record.raw)

    if version == WIRE_VERSION_POSITIONAL:
        features = decode_bits(bits, templates.features_for(app_name))
    else:
        features = decode_pairs(pairs)

    return AppExperiments(
        app_name=app_name,
        stamp=stamp,
        bucket=bucket,
        features=features,
        wire_version=version,
    )


def decode(raw_value: Optional[str], templates: TemplateRegistry) -> GlobalExperimentState:
    """
    Decode a cookie value against the registered templates.

    Args:
        raw_value: Cookie value, may be None or garbage
        templates: Registry providing the bit order of each app

    Returns:
        GlobalExperimentState; empty when the value is unusable
    """
    if not isinstance(raw_value, str) or not raw_value or not has_user_marker(raw_value):
        return GlobalExperimentState.empty()

    try:
        user_id, records = tokenize(raw_value)
        state = GlobalExperimentState(user_id=user_id or "")
        for record in records:
            state.apps[record.app_name] = _decode_record(record, templates)
    except MalformedRecordError as e:
        logger.warning(f"Discarding malformed experiment cookie: {e}")
        return GlobalExperimentState.empty(find_user_id(raw_value))

    logger.debug(f"Decoded experiments for apps {list(state.apps)}")
    return state


def _encode_record(entry: AppEntry, templates: TemplateRegistry) -> str:
    if isinstance(entry, OpaqueAppRecord):
        return entry.raw

    tokens: List[str] = [f"{APP_KEY}={entry.app_name}", f"{STAMP_KEY}={entry.stamp}"]
    if entry.wire_version == WIRE_VERSION_NAMED:
        tokens += [
            f"{BUCKET_KEY}={entry.bucket}",
            f"{VERSION_KEY}={WIRE_VERSION_NAMED}",
            f"{PAIRS_KEY}={encode_pairs(entry.features)}",
        ]
    else:
        bits = encode_bits(entry.features, templates.features_for(entry.app_name))
        tokens += [f"{BITS_KEY}={bits}", f"{BUCKET_KEY}={entry.bucket}"]
    return TOKEN_SEPARATOR.join(tokens)


def encode(state: GlobalExperimentState, templates: TemplateRegistry) -> str:
    """
    Encode the full state, echoing opaque records verbatim.

    Positional records need the same templates they were decoded with.
    """
    head = f"{USER_KEY}{KEY_VALUE_SEPARATOR}{state.user_id}"
    records = [_encode_record(entry, templates) for entry in state.apps.values()]
    if not records:
        return head
    return head + TOKEN_SEPARATOR + RECORD_SEPARATOR.join(records)
