"""
Self-describing name/value encoding (wire version 2).

Features are written as ``name:1`` pairs joined by ``|``. Variants are
flattened to ``feature#variant:1``, so variant-level truth survives a round
trip and template reordering does not shift values between features.
"""

from typing import Dict, List
from urllib.parse import quote, unquote

from ..constants import VARIANT_SEPARATOR
from ..exceptions import MalformedRecordError
from ..models import FeatureValue

PAIR_SEPARATOR = "|"
VALUE_SEPARATOR = ":"


def _quote(name: str) -> str:
    return quote(name, safe="")


def encode_pairs(features: Dict[str, FeatureValue]) -> str:
    pairs: List[str] = []
    for name, value in features.items():
        if isinstance(value, dict):
            for variant, selected in value.items():
                key = _quote(name) + VARIANT_SEPARATOR + _quote(variant)
                pairs.append(f"{key}{VALUE_SEPARATOR}{int(bool(selected))}")
        else:
            pairs.append(f"{_quote(name)}{VALUE_SEPARATOR}{int(bool(value))}")
    return PAIR_SEPARATOR.join(pairs)


def decode_pairs(encoded: str) -> Dict[str, FeatureValue]:
    features: Dict[str, FeatureValue] = {}
    if not encoded:
        return features

    for pair in encoded.split(PAIR_SEPARATOR):
        name, sep, flag = pair.rpartition(VALUE_SEPARATOR)
        if not sep or not name or flag not in ("0", "1"):
            raise MalformedRecordError(f"Invalid feature pair {pair!r}")
        selected = flag == "1"

        if VARIANT_SEPARATOR in name:
            base, variant = name.split(VARIANT_SEPARATOR, 1)
            base, variant = unquote(base), unquote(variant)
            current = features.setdefault(base, {})
            if not isinstance(current, dict):
                raise MalformedRecordError(f"Feature {base!r} is both a flag and a variant set")
            current[variant] = selected
        else:
            base = unquote(name)
            if isinstance(features.get(base), dict):
                raise MalformedRecordError(f"Feature {base!r} is both a flag and a variant set")
            features[base] = selected
    return features
