"""
Common test strategies for Hypothesis-based property testing.

This package provides reusable strategies for generating feature templates
and experiment cookie values with appropriate constraints.
"""

from .experiment_strategies import (
    app_template,
    feature_shapes,
    named_record,
    positional_record,
    templated_cookies,
    untemplated_cookies,
)

__all__ = [
    "app_template",
    "feature_shapes",
    "named_record",
    "positional_record",
    "templated_cookies",
    "untemplated_cookies",
]
