"""Internal utilities for crudkit.

This module contains code shared between adapters.
It is not part of the public API.
"""

from crudkit._internal.arguments import ensure_argument
from crudkit._internal.mapper import ExceptionMapper, MappingStrategy
from crudkit._internal.registry import StrategyRegistry

__all__ = [
    "ExceptionMapper",
    "MappingStrategy",
    "StrategyRegistry",
    "ensure_argument",
]
