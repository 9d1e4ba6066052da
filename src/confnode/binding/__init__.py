"""Typed binding layer."""

from confnode.binding.coercion import (
    admits_none,
    describe_type,
    read_value,
    write_value,
)
from confnode.binding.models import Binding, bind, defaults_tree, describe


__all__ = [
    "Binding",
    "admits_none",
    "bind",
    "defaults_tree",
    "describe",
    "describe_type",
    "read_value",
    "write_value",
]
