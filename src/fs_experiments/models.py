"""
In-memory model of the experiment cookie.

A GlobalExperimentState holds one entry per application found in the cookie.
Applications the running process can decode become AppExperiments; every
other entry is kept as an OpaqueAppRecord and echoed back verbatim.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union

from .constants import WIRE_VERSION_POSITIONAL

FeatureValue = Union[bool, Dict[str, bool]]


class FeatureShape(Enum):
    """Declared shape of a feature in a template."""

    BOOLEAN = "boolean"
    VARIANTS = "variants"


@dataclass
class AppExperiments:
    """Decoded experiment state of one namespace."""

    app_name: str
    stamp: str = ""
    bucket: str = ""
    features: Dict[str, FeatureValue] = field(default_factory=dict)
    # Instrumentation only, excluded from equality
    dirty_features: List[str] = field(default_factory=list, compare=False)
    wire_version: int = WIRE_VERSION_POSITIONAL

    def mark_dirty(self, feature_name: str) -> None:
        """Record a mutated feature once, in first-touch order."""
        if feature_name not in self.dirty_features:
            self.dirty_features.append(feature_name)

    def copy(self) -> "AppExperiments":
        features: Dict[str, FeatureValue] = {}
        for name, value in self.features.items():
            features[name] = dict(value) if isinstance(value, dict) else value
        return AppExperiments(
            app_name=self.app_name,
            stamp=self.stamp,
            bucket=self.bucket,
            features=features,
            dirty_features=list(self.dirty_features),
            wire_version=self.wire_version,
        )


@dataclass(frozen=True)
class OpaqueAppRecord:
    """A per-app record this process must not interpret."""

    app_name: str
    raw: str


AppEntry = Union[AppExperiments, OpaqueAppRecord]


@dataclass
class GlobalExperimentState:
    """Everything stored in the experiment cookie."""

    user_id: str = ""
    apps: Dict[str, AppEntry] = field(default_factory=dict)

    @classmethod
    def empty(cls, user_id: str = "") -> "GlobalExperimentState":
        return cls(user_id=user_id, apps={})

    def decoded_apps(self) -> Dict[str, AppExperiments]:
        return {
            name: entry for name, entry in self.apps.items() if isinstance(entry, AppExperiments)
        }

    def opaque_apps(self) -> Dict[str, OpaqueAppRecord]:
        return {
            name: entry for name, entry in self.apps.items() if isinstance(entry, OpaqueAppRecord)
        }
