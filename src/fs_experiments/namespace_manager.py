"""
Namespace manager for the running application's experiments.

Exactly two namespaces are live: the app-private one and the shared
``shared-ui`` one. Every other app found in the cookie stays opaque and is
written back untouched. A live namespace that is missing from the cookie
only joins it once it is written. A live namespace whose cookie record
cannot be decoded keeps that record; writes to it stay in memory.

Writes are persisted immediately and re-serialize the whole cookie from the
in-memory state. Two processes writing concurrently race with
last-write-wins semantics; ``reload()`` re-reads the cookie when a caller
knows it changed underneath.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .codec import decode, encode
from .config_loader import ExperimentSettings
from .constants import SHARED_NAMESPACE, VARIANT_SEPARATOR, per_app_cookie_name
from .interfaces.cookie_transport_interface import ICookieTransport
from .models import AppExperiments, FeatureValue, GlobalExperimentState, OpaqueAppRecord
from .template_registry import TemplateRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Where a feature name is read from and written to."""

    namespace: str
    feature: str
    variant: Optional[str] = None


def split_feature_name(name: str) -> Tuple[str, Optional[str]]:
    """Split ``feature#variant`` into its parts."""
    if VARIANT_SEPARATOR in name:
        feature, variant = name.split(VARIANT_SEPARATOR, 1)
        return feature, variant
    return name, None


class NamespaceManager:
    """
    Holds the decoded app-private and shared namespaces.

    Args:
        app_name: Name of the running application
        transport: Cookie storage
        templates: Feature templates used to decode and encode bit positions
        settings: Cookie name, path, lifetime and wire version
    """

    def __init__(
        self,
        app_name: str,
        transport: ICookieTransport,
        templates: TemplateRegistry,
        settings: Optional[ExperimentSettings] = None,
    ):
        self.app_name = app_name
        self.transport = transport
        self.templates = templates
        self.settings = settings or ExperimentSettings(app_name=app_name)
        self.state: GlobalExperimentState = GlobalExperimentState.empty()
        self._live: Dict[str, AppExperiments] = {}

    # Loading

    def load(self) -> None:
        """Decode the cookie and make sure both live namespaces exist."""
        raw = self.transport.get(self.settings.cookie_name)
        self.state = decode(raw, self.templates)

        if self.transport.get(per_app_cookie_name(self.app_name)) is not None:
            logger.debug(f"Ignoring reserved cookie {per_app_cookie_name(self.app_name)}")

        self._live = {}
        for namespace in dict.fromkeys((self.app_name, SHARED_NAMESPACE)):
            entry = self.state.apps.get(namespace)
            if isinstance(entry, AppExperiments):
                self._live[namespace] = entry
                continue
            if entry is not None:
                logger.warning(
                    f"No template registered for live namespace {namespace}; "
                    "its cookie record is kept and writes to it stay in memory"
                )
            self._live[namespace] = AppExperiments(
                app_name=namespace, wire_version=self.settings.wire_version
            )

    def reload(self) -> None:
        """Drop in-memory state and decode the cookie again."""
        logger.debug("Reloading experiment state from cookie")
        self.load()

    def reset(self) -> None:
        """Delete the experiment cookies and start from empty namespaces."""
        self.transport.unset(self.settings.cookie_name, path=self.settings.cookie_path)
        self.transport.unset(per_app_cookie_name(self.app_name), path=self.settings.cookie_path)
        self.load()

    @property
    def app(self) -> AppExperiments:
        return self._namespace(self.app_name)

    @property
    def shared(self) -> AppExperiments:
        return self._namespace(SHARED_NAMESPACE)

    def _namespace(self, name: str) -> AppExperiments:
        entry = self._live.get(name)
        if entry is None:
            raise RuntimeError(f"Namespace {name} is not loaded")
        return entry

    def _live_namespaces(self) -> List[AppExperiments]:
        if self.app_name == SHARED_NAMESPACE:
            return [self.shared]
        return [self.app, self.shared]

    def _is_attached(self, name: str) -> bool:
        return name in self.state.apps and self.state.apps[name] is self._live.get(name)

    def _attach(self, namespace: AppExperiments) -> bool:
        """
        Make a live namespace part of the serialized state.

        Returns False when the cookie holds an undecodable record for it,
        which is never overwritten.
        """
        current = self.state.apps.get(namespace.app_name)
        if current is namespace:
            return True
        if isinstance(current, OpaqueAppRecord):
            logger.warning(
                f"Not persisting write to {namespace.app_name}: its cookie record "
                "has no registered template"
            )
            return False
        self.state.apps[namespace.app_name] = namespace
        return True

    # Resolution

    def resolve(self, name: str) -> Resolution:
        """
        Decide which namespace owns a feature name.

        A feature declared in the shared template, or already present in
        the shared namespace, lives there. Everything else is app-private.
        """
        feature, variant = split_feature_name(name)
        owner = self.templates.owner_of(feature)
        if owner is None and feature in self.shared.features:
            owner = SHARED_NAMESPACE
        return Resolution(owner or self.app_name, feature, variant)

    @staticmethod
    def _lookup(namespace: AppExperiments, resolution: Resolution) -> Optional[bool]:
        value = namespace.features.get(resolution.feature)
        if value is None:
            return None
        if resolution.variant is None:
            if isinstance(value, dict):
                return any(value.values())
            return bool(value)
        if not isinstance(value, dict):
            return None
        selected = value.get(resolution.variant)
        return None if selected is None else bool(selected)

    # Queries and mutations

    def read(self, name: str, default: bool = False) -> bool:
        """
        Evaluate a feature.

        Returns ``default`` when neither namespace defines it. Otherwise a
        truthy app-private value wins and the shared value is used as
        fallback.
        """
        resolution = self.resolve(name)
        app_value = self._lookup(self.app, resolution)
        shared_value = self._lookup(self.shared, resolution)

        if app_value is None and shared_value is None:
            return default
        if app_value:
            return True
        return bool(shared_value)

    def write(self, name: str, value: bool) -> None:
        """Set a feature in its resolved namespace and persist the cookie."""
        resolution = self.assign(name, value)
        if resolution is None:
            return

        namespace = self._namespace(resolution.namespace)
        namespace.mark_dirty(resolution.feature)
        logger.debug(f"Set {name}={bool(value)} in {resolution.namespace}")
        if self._attach(namespace):
            self.persist()

    def assign(self, name: str, value: bool) -> Optional[Resolution]:
        """Set a feature in memory only. Returns None if the write was refused."""
        resolution = self.resolve(name)
        namespace = self._namespace(resolution.namespace)
        if not self._assign(namespace, resolution, bool(value)):
            return None
        return resolution

    @staticmethod
    def _assign(namespace: AppExperiments, resolution: Resolution, value: bool) -> bool:
        current = namespace.features.get(resolution.feature)

        if resolution.variant is None:
            if isinstance(current, dict):
                logger.warning(
                    f"Ignoring plain write to variant feature {resolution.feature}; "
                    "address a variant as feature#variant"
                )
                return False
            namespace.features[resolution.feature] = value
            return True

        if not isinstance(current, dict):
            if current is not None:
                logger.warning(f"Replacing flag {resolution.feature} with a variant set")
            current = {}
            namespace.features[resolution.feature] = current
        current[resolution.variant] = value
        return True

    def persist(self) -> None:
        """Encode the whole state and write it to the cookie."""
        self.transport.set(
            self.settings.cookie_name,
            encode(self.state, self.templates),
            path=self.settings.cookie_path,
            max_age=self.settings.max_age_seconds,
        )

    def active_list(self) -> List[str]:
        """List truthy features, app-private first, then shared."""
        active: List[str] = []
        for namespace in self._live_namespaces():
            for feature, value in namespace.features.items():
                if isinstance(value, dict):
                    names = [
                        f"{feature}{VARIANT_SEPARATOR}{variant}"
                        for variant, selected in value.items()
                        if selected
                    ]
                else:
                    names = [feature] if value else []
                for name in names:
                    if name not in active:
                        active.append(name)
        return active

    def dirty_features(self, namespace: Optional[str] = None) -> List[str]:
        return list(self._namespace(namespace or self.app_name).dirty_features)

    # Snapshots for temporary overrides

    def snapshot(self) -> Dict[str, AppExperiments]:
        return {ns.app_name: ns.copy() for ns in self._live_namespaces()}

    def restore(self, snapshot: Dict[str, AppExperiments]) -> None:
        for name, namespace in snapshot.items():
            restored = namespace.copy()
            if self._is_attached(name):
                self.state.apps[name] = restored
            self._live[name] = restored

    def features(self, namespace: Optional[str] = None) -> Dict[str, FeatureValue]:
        return dict(self._namespace(namespace or self.app_name).features)
