"""Operation registry module."""
from __future__ import annotations

from patchlang.errors import RegistryLoadError, UnknownOperationError
from patchlang.registry.operations import (
    WILDCARD,
    OperationDescriptor,
    OperationRegistry,
    parse_operation_map,
    resolve_in,
)

__all__ = [
    "OperationDescriptor",
    "OperationRegistry",
    "parse_operation_map",
    "resolve_in",
    "WILDCARD",
    "RegistryLoadError",
    "UnknownOperationError",
]
