"""
Public query/mutation API.

Application code only talks to ExperimentAPI; it never sees the wire
format. The API starts uninitialized and decodes the cookie exactly once,
on an explicit ``initialize()`` or on the first query or mutation.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Union

from ..config_loader import ExperimentSettings, load_settings
from ..exceptions import ConfigurationError, TemplateRegistryClosedError
from ..interfaces.cookie_transport_implementations import InMemoryCookieJar
from ..interfaces.cookie_transport_interface import ICookieTransport
from ..namespace_manager import NamespaceManager
from ..template_registry import TemplateRegistry

logger = logging.getLogger(__name__)


class ApiState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class ExperimentAPI:
    """
    Experiment flags of one application.

    Args:
        app_name: Running application; defaults to ``settings.app_name``
        transport: Cookie storage; an in-memory jar when omitted
        registry: Feature templates; ``settings.templates`` are added to it
        settings: Cookie and wire settings
    """

    def __init__(
        self,
        app_name: Optional[str] = None,
        transport: Optional[ICookieTransport] = None,
        registry: Optional[TemplateRegistry] = None,
        settings: Optional[ExperimentSettings] = None,
    ):
        self.settings = settings or ExperimentSettings(app_name=app_name or "")
        self.app_name = app_name or self.settings.app_name
        if not self.app_name:
            raise ConfigurationError("An app name is required")

        self.registry = registry if registry is not None else TemplateRegistry()
        if self.settings.templates:
            self.registry.register(self.settings.templates)

        self.transport = transport if transport is not None else InMemoryCookieJar()
        self.manager = NamespaceManager(self.app_name, self.transport, self.registry, self.settings)
        self._state = ApiState.UNINITIALIZED

    @classmethod
    def from_config(
        cls, config_path: Union[str, Path], transport: Optional[ICookieTransport] = None
    ) -> "ExperimentAPI":
        """Create an API from a YAML configuration file."""
        return cls(transport=transport, settings=load_settings(config_path))

    @property
    def state(self) -> ApiState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is ApiState.INITIALIZED

    def initialize(self) -> None:
        """Decode the cookie. Later calls are no-ops."""
        if self.is_initialized:
            return
        self.manager.load()
        self._state = ApiState.INITIALIZED
        logger.debug(f"Experiments initialized for {self.app_name}")

    def default_ex(self, template: Mapping) -> None:
        """
        Supply feature templates.

        Must run before the cookie is decoded, since templates fix the bit
        positions used by the decoder.

        Raises:
            TemplateRegistryClosedError: If the API is already initialized
            TemplateError: If the template is malformed
        """
        if self.is_initialized:
            raise TemplateRegistryClosedError(
                "Templates must be supplied before experiments are first read or written"
            )
        self.registry.register(template)

    def show_ex(self, name: str, default: bool = False) -> bool:
        """Evaluate a feature, or ``feature#variant``."""
        self.initialize()
        return self.manager.read(name, default)

    def set_ex(self, name: str, value: bool) -> None:
        """Set a feature and write the cookie."""
        self.initialize()
        self.manager.write(name, value)

    def active_list(self) -> List[str]:
        """Names of all truthy features, app-private first."""
        self.initialize()
        return self.manager.active_list()

    def dirty_features(self, namespace: Optional[str] = None) -> List[str]:
        """Features mutated since load, in first-touch order."""
        self.initialize()
        return self.manager.dirty_features(namespace)

    def reload(self) -> None:
        """Re-read the cookie, discarding unsaved in-memory state."""
        self.initialize()
        self.manager.reload()

    def reset(self) -> None:
        """Delete the experiment cookies."""
        self.initialize()
        self.manager.reset()
