"""
Interface for abstracting cookie storage.
Implements Dependency Inversion Principle for get/set/delete of named cookies.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..constants import COOKIE_MAX_AGE_SECONDS, COOKIE_PATH


class ICookieTransport(ABC):
    """
    Interface for reading and writing raw cookie strings.

    Implementations only move bytes; they never interpret the value.
    A write that the underlying storage refuses is dropped silently.
    """

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """
        Get the value of a cookie.

        Args:
            name: Cookie name

        Returns:
            The raw value or None if the cookie is absent
        """
        pass

    @abstractmethod
    def set(
        self,
        name: str,
        value: str,
        path: str = COOKIE_PATH,
        max_age: int = COOKIE_MAX_AGE_SECONDS,
    ) -> None:
        """
        Store a cookie.

        Args:
            name: Cookie name
            value: Raw value
            path: Cookie path
            max_age: Lifetime in seconds
        """
        pass

    @abstractmethod
    def unset(self, name: str, path: str = COOKIE_PATH) -> None:
        """Delete a cookie."""
        pass


# Factory functions for creating cookie transports


def create_cookie_transport(kind: str = "memory", **kwargs) -> ICookieTransport:
    """
    Create a cookie transport implementation.

    Args:
        kind: "memory" for InMemoryCookieJar or "header" for HeaderCookieJar
        **kwargs: Passed to the implementation constructor
    """
    from .cookie_transport_implementations import HeaderCookieJar, InMemoryCookieJar

    if kind == "memory":
        return InMemoryCookieJar(**kwargs)
    if kind == "header":
        return HeaderCookieJar(**kwargs)
    raise ValueError(f"Unknown cookie transport: {kind}")
