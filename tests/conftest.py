"""
Global test configuration and fixtures for the experiment cookie test suite.

This module provides:
- Shared feature templates and cookie values used across the unit tests
- Cookie jar and API fixtures wired to those templates
- Pytest collection hooks for automatic test categorization based on file location
"""

import os
import sys
from pathlib import Path

import pytest

# Add src and the project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fs_experiments import (  # noqa: E402
    EXPERIMENT_COOKIE_NAME,
    ExperimentAPI,
    InMemoryCookieJar,
    TemplateRegistry,
    reset_default_api,
)
from tests.fixtures.experiment_data import APP_NAME, COOKIE_VALUE, TEMPLATES  # noqa: E402

# ============================================================================
# PYTEST CONFIGURATION AND HOOKS
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, isolated)")
    config.addinivalue_line("markers", "codec: marks tests of the cookie wire format")
    config.addinivalue_line("markers", "namespace: marks tests of namespace resolution")
    config.addinivalue_line("markers", "api: marks tests of the public experiment API")
    config.addinivalue_line("markers", "property: marks hypothesis property tests")


def pytest_collection_modifyitems(config, items):
    """Automatically add markers to tests based on their location."""
    tests_root = Path(__file__).parent
    dir_to_marker = {
        "unit": pytest.mark.unit,
        "codec": pytest.mark.codec,
        "namespace": pytest.mark.namespace,
        "api": pytest.mark.api,
    }

    for item in items:
        try:
            parts = Path(item.fspath).relative_to(tests_root).parts
        except ValueError:
            parts = Path(item.fspath).parts
        for key, marker in dir_to_marker.items():
            if key in parts:
                item.add_marker(marker)
        if "properties" in Path(item.fspath).name:
            item.add_marker(pytest.mark.property)


# ============================================================================
# SHARED FIXTURES
# ============================================================================


@pytest.fixture
def templates():
    return TemplateRegistry(TEMPLATES)


@pytest.fixture
def cookie_jar():
    return InMemoryCookieJar({EXPERIMENT_COOKIE_NAME: COOKIE_VALUE})


@pytest.fixture
def empty_jar():
    return InMemoryCookieJar()


@pytest.fixture
def api(cookie_jar, templates):
    return ExperimentAPI(APP_NAME, transport=cookie_jar, registry=templates)


@pytest.fixture(autouse=True)
def clean_default_api():
    """Make sure module-level API state never leaks between tests."""
    reset_default_api()
    yield
    reset_default_api()
