"""
Test fixtures for the experiment cookie test suite.

This module provides the shared templates and cookie values used across
test files.
"""

from .experiment_data import APP_NAME, COOKIE_VALUE, SHARED_X_COOKIE, TEMPLATES

__all__ = ["APP_NAME", "COOKIE_VALUE", "SHARED_X_COOKIE", "TEMPLATES"]
