"""
Interface definitions for experiment collaborators.
"""

from .cookie_transport_interface import ICookieTransport, create_cookie_transport
from .cookie_transport_implementations import HeaderCookieJar, InMemoryCookieJar

__all__ = [
    "ICookieTransport",
    "create_cookie_transport",
    "HeaderCookieJar",
    "InMemoryCookieJar",
]
