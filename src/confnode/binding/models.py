"""Typed bindings between Python values and tree paths."""

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from confnode.binding.coercion import (
    admits_none,
    describe_type,
    read_value,
    write_value,
)
from confnode.errors import format_path
from confnode.node import ConfigTree, Node, NodePath, PathLike, as_path


T = TypeVar("T")


@dataclass(frozen=True)
class Binding(Generic[T]):
    """Associates a typed value with a path in a tree.

    Attributes:
        path: Location of the value.
        type: Type hint of the value.
        default: Value returned when the path is absent, or null for a type
            that does not admit ``None``.
        comment: Human-readable description of the setting.
    """

    path: NodePath
    type: Any
    default: T | None = None
    comment: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", as_path(self.path))

    def read(self, tree: ConfigTree) -> T:
        """Read the typed value from ``tree``.

        The tree is never modified. A missing value yields a copy of the
        default, as does a null one unless the type admits ``None``.

        Raises:
            TypeMismatchError: If the node cannot be coerced to the type.
            ValidationError: If the value violates a constraint.
        """
        node = tree.get(self.path)
        if not isinstance(node, Node) or (
            node.is_null and not admits_none(self.type)
        ):
            return copy.deepcopy(self.default)  # type: ignore[return-value]
        return read_value(node, self.type, self.path)  # type: ignore[no-any-return]

    def write(self, tree: ConfigTree, value: T) -> None:
        """Write a typed value into ``tree``, creating intermediate structure.

        Raises:
            TypeMismatchError: If the value does not match the type.
            ValidationError: If the value violates a constraint.
        """
        tree.set(self.path, write_value(value, self.type, self.path))


def bind(
    path: PathLike,
    type_: type[T] | Any,
    default: T | None = None,
    comment: str | None = None,
) -> Binding[T]:
    """Create a binding; ``path`` may be a tuple or a dotted string."""
    return Binding(path=as_path(path), type=type_, default=default, comment=comment)


def defaults_tree(bindings: Iterable[Binding[Any]]) -> ConfigTree:
    """Build a tree holding every binding's non-None default."""
    tree = ConfigTree()
    for binding in bindings:
        if binding.default is not None:
            binding.write(tree, binding.default)
    return tree


def describe(bindings: Iterable[Binding[Any]]) -> list[dict[str, Any]]:
    """List bindings for documentation, in the given order."""
    return [
        {
            "path": format_path(binding.path),
            "type": describe_type(binding.type),
            "default": binding.default,
            "comment": binding.comment,
        }
        for binding in bindings
    ]
