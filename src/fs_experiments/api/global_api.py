"""
Module-level convenience functions backed by one default ExperimentAPI.

Templates passed to ``default_ex`` before ``configure`` are kept and handed
to the API once it is created.
"""

import logging
import os
from typing import List, Mapping, Optional

from ..config_loader import ENV_APP_NAME, ExperimentSettings, apply_env_overrides
from ..interfaces.cookie_transport_interface import ICookieTransport
from ..template_registry import TemplateRegistry
from .experiment_api import ExperimentAPI

logger = logging.getLogger(__name__)

_default_api: Optional[ExperimentAPI] = None
_pending_registry = TemplateRegistry()


def configure(
    app_name: Optional[str] = None,
    transport: Optional[ICookieTransport] = None,
    settings: Optional[ExperimentSettings] = None,
) -> ExperimentAPI:
    """Install the default API and return it."""
    global _default_api, _pending_registry

    settings = settings or apply_env_overrides(ExperimentSettings(app_name=app_name or ""))
    _default_api = ExperimentAPI(
        app_name=app_name,
        transport=transport,
        registry=_pending_registry,
        settings=settings,
    )
    _pending_registry = TemplateRegistry()
    return _default_api


def get_api() -> ExperimentAPI:
    """Return the default API, creating it from the environment if needed."""
    if _default_api is None:
        app_name = os.environ.get(ENV_APP_NAME)
        if not app_name:
            logger.warning(f"{ENV_APP_NAME} is not set, using app name 'default'")
            app_name = "default"
        return configure(app_name=app_name)
    return _default_api


def reset_default_api() -> None:
    """Forget the default API and any pending templates."""
    global _default_api, _pending_registry
    _default_api = None
    _pending_registry = TemplateRegistry()


def default_ex(template: Mapping) -> None:
    if _default_api is None:
        _pending_registry.register(template)
        return
    _default_api.default_ex(template)


def show_ex(name: str, default: bool = False) -> bool:
    return get_api().show_ex(name, default)


def set_ex(name: str, value: bool) -> None:
    get_api().set_ex(name, value)


def active_list() -> List[str]:
    return get_api().active_list()
