"""
Two-phase registration of globally shared dialog components.

Components registered while the registry is PENDING are queued. The single
``mark_ready()`` call drains the queue in registration order and moves the
registry to READY, after which registration is refused.
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

from .exceptions import RegistrationClosedError

logger = logging.getLogger(__name__)

_DASHED_LETTER_RE = re.compile(r"-([a-z])")


class RegistryPhase(Enum):
    PENDING = "pending"
    READY = "ready"


def camel_case_name(element_name: str) -> str:
    """``fs-person-card`` -> ``fsPersonCard``"""
    return _DASHED_LETTER_RE.sub(lambda match: match.group(1).upper(), element_name)


class DialogRegistry:
    """Registry exposing each created component under its camel-cased name."""

    def __init__(self):
        self.phase = RegistryPhase.PENDING
        self._queue: List[Tuple[str, Callable[[str], Any]]] = []
        self._components: Dict[str, Any] = {}

    def register(self, element_name: str, factory: Callable[[str], Any]) -> None:
        """
        Queue a component for creation.

        Args:
            element_name: Dashed element name, e.g. ``fs-person-card``
            factory: Called with the element name to create the component

        Raises:
            RegistrationClosedError: If the registry is already READY
        """
        if self.phase is RegistryPhase.READY:
            raise RegistrationClosedError(
                f"Cannot register {element_name} after the dialog registry is ready"
            )
        self._queue.append((element_name, factory))

    def mark_ready(self) -> None:
        """Create every queued component exactly once."""
        if self.phase is RegistryPhase.READY:
            return
        self.phase = RegistryPhase.READY
        queue, self._queue = self._queue, []
        for element_name, factory in queue:
            self._create(element_name, factory)

    def _create(self, element_name: str, factory: Callable[[str], Any]) -> None:
        attribute = camel_case_name(element_name)
        if attribute in self._components:
            logger.error(f"Attempted to create element {element_name} which already exists")
            return
        self._components[attribute] = factory(element_name)

    def __getattr__(self, name: str) -> Any:
        components = self.__dict__.get("_components", {})
        if name in components:
            return components[name]
        raise AttributeError(name)

    def get(self, attribute: str) -> Any:
        return self._components.get(attribute)

    @property
    def pending(self) -> List[str]:
        return [element_name for element_name, _ in self._queue]

    def names(self) -> List[str]:
        return list(self._components)
