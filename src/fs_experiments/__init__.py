"""Package initializer for fs_experiments.

Exports the experiment API, the codec and the collaborators needed to wire
them up.
"""

from .api import (
    ApiState,
    ExperimentAPI,
    active_list,
    configure,
    default_ex,
    get_api,
    reset_default_api,
    set_ex,
    show_ex,
)
from .codec import decode, encode
from .config_loader import ExperimentSettings, load_settings
from .constants import EXPERIMENT_COOKIE_NAME, SHARED_NAMESPACE
from .context_managers import disable_all_experiments, override_experiments
from .dialog_registry import DialogRegistry
from .exceptions import (
    ConfigurationError,
    ExperimentError,
    RegistrationClosedError,
    TemplateError,
    TemplateRegistryClosedError,
)
from .interfaces import HeaderCookieJar, ICookieTransport, InMemoryCookieJar
from .models import AppExperiments, GlobalExperimentState, OpaqueAppRecord
from .namespace_manager import NamespaceManager
from .template_registry import TemplateRegistry

__all__ = [
    "ApiState",
    "ExperimentAPI",
    "active_list",
    "configure",
    "default_ex",
    "get_api",
    "reset_default_api",
    "set_ex",
    "show_ex",
    "decode",
    "encode",
    "ExperimentSettings",
    "load_settings",
    "EXPERIMENT_COOKIE_NAME",
    "SHARED_NAMESPACE",
    "disable_all_experiments",
    "override_experiments",
    "DialogRegistry",
    "ConfigurationError",
    "ExperimentError",
    "RegistrationClosedError",
    "TemplateError",
    "TemplateRegistryClosedError",
    "HeaderCookieJar",
    "ICookieTransport",
    "InMemoryCookieJar",
    "AppExperiments",
    "GlobalExperimentState",
    "OpaqueAppRecord",
    "NamespaceManager",
    "TemplateRegistry",
]
