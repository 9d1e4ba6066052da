"""Versioned configuration schema transformations."""

from confnode.transform.transformation import (
    VERSION_UNKNOWN,
    Migration,
    Transformation,
    TransformationResult,
    chain,
    move,
    remove,
    set_default,
)


__all__ = [
    "VERSION_UNKNOWN",
    "Migration",
    "Transformation",
    "TransformationResult",
    "chain",
    "move",
    "remove",
    "set_default",
]
