"""
Template-positional bit encoding (wire version 1).

Bit ``i`` of the ``v=`` value belongs to feature ``i`` of the app's
template. For a multi-variant feature the bit only says whether any variant
is selected.
"""

import logging
import re
from typing import Dict, List

from ..exceptions import MalformedRecordError
from ..models import FeatureShape, FeatureValue
from ..template_registry import FeatureTemplate

logger = logging.getLogger(__name__)

_BITSTRING_RE = re.compile(r"[01]*")


def _is_truthy(value: FeatureValue) -> bool:
    if isinstance(value, dict):
        return any(value.values())
    return bool(value)


def decode_bits(bits: str, templates: List[FeatureTemplate]) -> Dict[str, FeatureValue]:
    """
    Rebuild the feature map of an app from its bitstring.

    Missing trailing bits read as '0'. Bits beyond the template are ignored.
    """
    if not _BITSTRING_RE.fullmatch(bits):
        raise MalformedRecordError(f"Bitstring {bits!r} contains characters other than 0/1")
    if len(bits) > len(templates):
        logger.debug(f"Ignoring {len(bits) - len(templates)} bits beyond the template")

    features: Dict[str, FeatureValue] = {}
    for index, template in enumerate(templates):
        is_set = index < len(bits) and bits[index] == "1"
        if template.shape is FeatureShape.VARIANTS:
            if is_set:
                # Which variant was selected is not on the wire
                features[template.name] = dict(template.variant_defaults)
            else:
                features[template.name] = {variant: False for variant in template.variant_defaults}
        else:
            features[template.name] = is_set
    return features


def encode_bits(features: Dict[str, FeatureValue], templates: List[FeatureTemplate]) -> str:
    """Encode a feature map as one bit per template feature, in template order."""
    declared = {template.name for template in templates}
    dropped = [name for name in features if name not in declared]
    if dropped:
        logger.debug(f"Features not in the template cannot be encoded positionally: {dropped}")

    return "".join(
        "1" if _is_truthy(features.get(template.name, False)) else "0" for template in templates
    )
