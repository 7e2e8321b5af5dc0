"""
Feature template registry.

This module holds the ordered feature declarations of every application.
The declared order is the bit order of the positional wire format, so
features are only ever appended, never reordered.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import SHARED_NAMESPACE
from .exceptions import TemplateError
from .models import FeatureShape

logger = logging.getLogger(__name__)


@dataclass
class FeatureTemplate:
    """Declaration of one feature."""

    name: str
    shape: FeatureShape = FeatureShape.BOOLEAN
    variant_defaults: Dict[str, bool] = field(default_factory=dict)


class TemplateRegistry:
    """
    Registry of feature templates keyed by application name.

    Templates are supplied in the form::

        {"myapp": {"features": {"alpha": {}, "layout": {"wide": True, "narrow": False}}}}

    An empty mapping, a bool or None declares a boolean feature. A non-empty
    mapping of variant name to bool declares a multi-variant feature.
    Features declared under the shared namespace are owned by it.
    """

    def __init__(self, templates: Optional[Mapping] = None):
        self._templates: Dict[str, Dict[str, FeatureTemplate]] = {}
        if templates:
            self.register(templates)

    def register(self, templates: Mapping) -> None:
        """
        Register or extend templates for one or more applications.

        Args:
            templates: Mapping of app name to ``{"features": {...}}``

        Raises:
            TemplateError: If any entry has an invalid shape
        """
        if not isinstance(templates, Mapping):
            raise TemplateError(f"Templates must be a mapping, got {type(templates).__name__}")

        parsed = {app: self._parse_app(app, entry) for app, entry in templates.items()}

        for app_name, features in parsed.items():
            existing = self._templates.setdefault(app_name, {})
            for feature_name, template in features.items():
                # Existing entries keep their position
                existing[feature_name] = template
            logger.debug(f"Registered template for {app_name}: {list(existing)}")

    def _parse_app(self, app_name: Any, entry: Any) -> Dict[str, FeatureTemplate]:
        if not isinstance(app_name, str) or not app_name:
            raise TemplateError(f"App names must be non-empty strings, got {app_name!r}")
        if entry is None:
            return {}
        if not isinstance(entry, Mapping):
            raise TemplateError(f"Template for {app_name} must be a mapping")

        features = entry.get("features", {})
        if features is None:
            return {}
        if not isinstance(features, Mapping):
            raise TemplateError(f"'features' of {app_name} must be a mapping")

        return {
            str(name): self._parse_feature(app_name, str(name), shape)
            for name, shape in features.items()
        }

    @staticmethod
    def _parse_feature(app_name: str, feature_name: str, shape: Any) -> FeatureTemplate:
        if "#" in feature_name or not feature_name:
            raise TemplateError(f"Invalid feature name {feature_name!r} in {app_name}")
        if shape is None or isinstance(shape, bool):
            return FeatureTemplate(feature_name)
        if not isinstance(shape, Mapping):
            raise TemplateError(
                f"Feature {app_name}.{feature_name} must be a mapping, bool or null"
            )
        if not shape:
            return FeatureTemplate(feature_name)

        defaults: Dict[str, bool] = {}
        for variant, default in shape.items():
            if not isinstance(default, bool):
                raise TemplateError(
                    f"Variant {app_name}.{feature_name}#{variant} default must be a bool"
                )
            defaults[str(variant)] = default
        return FeatureTemplate(feature_name, FeatureShape.VARIANTS, defaults)

    def has_template(self, app_name: str) -> bool:
        return app_name in self._templates

    def app_names(self) -> List[str]:
        return list(self._templates)

    def features_for(self, app_name: str) -> List[FeatureTemplate]:
        """Get feature templates of an app in declared order."""
        return list(self._templates.get(app_name, {}).values())

    def feature_names(self, app_name: str) -> List[str]:
        return list(self._templates.get(app_name, {}))

    def get_feature(self, app_name: str, feature_name: str) -> Optional[FeatureTemplate]:
        return self._templates.get(app_name, {}).get(feature_name)

    def shape_of(self, app_name: str, feature_name: str) -> Optional[FeatureShape]:
        template = self.get_feature(app_name, feature_name)
        return template.shape if template else None

    def variant_defaults(self, app_name: str, feature_name: str) -> Dict[str, bool]:
        template = self.get_feature(app_name, feature_name)
        return dict(template.variant_defaults) if template else {}

    def owner_of(self, feature_name: str) -> Optional[str]:
        """Return the shared namespace if it declares the feature, else None."""
        if feature_name in self._templates.get(SHARED_NAMESPACE, {}):
            return SHARED_NAMESPACE
        return None

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        """Export templates back to the registration format."""
        return {
            app: {
                "features": {
                    name: dict(t.variant_defaults) if t.shape is FeatureShape.VARIANTS else {}
                    for name, t in features.items()
                }
            }
            for app, features in self._templates.items()
        }
