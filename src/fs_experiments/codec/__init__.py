"""
Experiment cookie codec.

- record_parser: tokenizes the cookie value into per-app records
- positional: template-relative bit encoding (wire version 1)
- named: self-describing name/value encoding (wire version 2)
- codec: decode/encode of the whole GlobalExperimentState
"""

from .codec import decode, encode

__all__ = ["decode", "encode"]
