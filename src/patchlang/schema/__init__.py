"""Typed parameter schema for operations.

Exports ``ParamKind``, ``ParamSpec`` and the coercion helpers.
"""
from __future__ import annotations

from patchlang.schema.params import (
    ParamKind,
    ParamSpec,
    check_arguments,
    coerce,
    coerce_arguments,
    is_identifier,
    parse_bool,
)

__all__ = [
    "ParamKind",
    "ParamSpec",
    "coerce",
    "coerce_arguments",
    "check_arguments",
    "is_identifier",
    "parse_bool",
]
