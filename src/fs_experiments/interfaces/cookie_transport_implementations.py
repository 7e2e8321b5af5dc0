"""
Concrete implementations of the cookie transport interface.
"""

import logging
from dataclasses import dataclass
from http.cookies import CookieError, SimpleCookie
from typing import Dict, List, Optional

from ..constants import COOKIE_MAX_AGE_SECONDS, COOKIE_PATH
from .cookie_transport_interface import ICookieTransport

logger = logging.getLogger(__name__)


@dataclass
class StoredCookie:
    value: str
    path: str
    max_age: int


class InMemoryCookieJar(ICookieTransport):
    """
    Dict-backed cookie store.

    With ``enabled=False`` it behaves like a browser with cookies turned
    off: reads find nothing and writes are dropped.
    """

    def __init__(self, cookies: Optional[Dict[str, str]] = None, enabled: bool = True):
        self.enabled = enabled
        self.cookies: Dict[str, StoredCookie] = {}
        for name, value in (cookies or {}).items():
            self.cookies[name] = StoredCookie(value, COOKIE_PATH, COOKIE_MAX_AGE_SECONDS)

    def get(self, name: str) -> Optional[str]:
        if not self.enabled:
            return None
        stored = self.cookies.get(name)
        return stored.value if stored else None

    def set(
        self,
        name: str,
        value: str,
        path: str = COOKIE_PATH,
        max_age: int = COOKIE_MAX_AGE_SECONDS,
    ) -> None:
        if not self.enabled:
            return
        self.cookies[name] = StoredCookie(value, path, max_age)

    def unset(self, name: str, path: str = COOKIE_PATH) -> None:
        if not self.enabled:
            return
        self.cookies.pop(name, None)


class HeaderCookieJar(ICookieTransport):
    """
    Cookie transport for an HTTP request/response cycle.

    Reads come from the request's ``Cookie`` header; writes are collected
    and rendered as ``Set-Cookie`` header values. Values are written
    verbatim, since every reader of the experiment cookie expects the raw
    wire format.
    """

    def __init__(self, cookie_header: Optional[str] = None):
        self._incoming: SimpleCookie = SimpleCookie()
        self._outgoing: Dict[str, StoredCookie] = {}
        if cookie_header:
            try:
                self._incoming.load(cookie_header)
            except CookieError as e:
                logger.warning(f"Ignoring unparseable Cookie header: {e}")

    def get(self, name: str) -> Optional[str]:
        if name in self._outgoing:
            stored = self._outgoing[name]
            # A pending deletion hides the request value
            return None if stored.max_age == 0 else stored.value
        if name in self._incoming:
            return self._incoming[name].value
        return None

    def set(
        self,
        name: str,
        value: str,
        path: str = COOKIE_PATH,
        max_age: int = COOKIE_MAX_AGE_SECONDS,
    ) -> None:
        self._outgoing[name] = StoredCookie(value, path, max_age)

    def unset(self, name: str, path: str = COOKIE_PATH) -> None:
        self.set(name, "", path=path, max_age=0)

    def set_cookie_headers(self) -> List[str]:
        """Render pending writes as ``Set-Cookie`` header values."""
        return [
            f"{name}={stored.value}; Path={stored.path}; Max-Age={stored.max_age}"
            for name, stored in self._outgoing.items()
        ]
