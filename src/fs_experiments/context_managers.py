"""
Context managers for temporarily overriding experiments.

Overrides only touch the in-memory namespaces; the cookie is neither read
nor written, and the previous namespaces are restored on exit.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator

from .api.experiment_api import ExperimentAPI

logger = logging.getLogger(__name__)


@contextmanager
def override_experiments(
    api: ExperimentAPI, overrides: Dict[str, bool]
) -> Generator[ExperimentAPI, None, None]:
    """
    Temporarily force experiment values.

    Args:
        api: API whose namespaces are overridden
        overrides: Feature names (``feature`` or ``feature#variant``) and values

    Yields:
        The same API
    """
    api.initialize()
    manager = api.manager
    original = manager.snapshot()

    try:
        for name, value in overrides.items():
            manager.assign(name, value)
        logger.debug(f"Experiments overridden via context manager: {overrides}")
        yield api
    finally:
        manager.restore(original)
        logger.debug("Experiment override context manager restored")


@contextmanager
def disable_all_experiments(api: ExperimentAPI) -> Generator[ExperimentAPI, None, None]:
    """Temporarily turn every active experiment off."""
    overrides = {name: False for name in api.active_list()}
    with override_experiments(api, overrides):
        yield api
