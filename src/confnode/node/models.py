"""Format-agnostic node model.

A node is a tagged value: ``kind`` selects the variant and ``value`` holds
its payload. Containers own their children exclusively.
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any, Final


class NodeKind(str, Enum):
    """Node variants."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


SCALAR_KINDS: Final[frozenset[NodeKind]] = frozenset(
    {NodeKind.NULL, NodeKind.BOOLEAN, NodeKind.NUMBER, NodeKind.STRING}
)


class AbsentType:
    """Marker type for a path that addresses no node.

    There is exactly one instance, ``ABSENT``. It is falsy and is never
    equal to a NULL node.
    """

    _instance: "AbsentType | None" = None

    def __new__(cls) -> "AbsentType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Final = AbsentType()


class Node:
    """One unit of a configuration tree.

    Use the ``null``/``boolean``/``number``/``string``/``sequence``/
    ``mapping`` constructors, or ``from_python`` for plain data.
    """

    __slots__ = ("kind", "value")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, kind: NodeKind, value: Any = None) -> None:
        """Initialize a node.

        Args:
            kind: Variant of the node.
            value: Payload matching the variant.
        """
        self.kind = kind
        self.value = value

    @classmethod
    def null(cls) -> "Node":
        return cls(NodeKind.NULL, None)

    @classmethod
    def boolean(cls, value: bool) -> "Node":
        return cls(NodeKind.BOOLEAN, bool(value))

    @classmethod
    def number(cls, value: int | float) -> "Node":
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(
                f"number node requires int or float, got {type(value).__name__}"
            )
        return cls(NodeKind.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> "Node":
        return cls(NodeKind.STRING, str(value))

    @classmethod
    def sequence(cls, items: "list[Node] | None" = None) -> "Node":
        return cls(NodeKind.SEQUENCE, list(items or []))

    @classmethod
    def mapping(cls, items: "Mapping[str, Node] | None" = None) -> "Node":
        return cls(NodeKind.MAPPING, dict(items or {}))

    @classmethod
    def from_python(cls, data: Any) -> "Node":
        """Build a node tree from plain Python data.

        Args:
            data: None, bool, int, float, str, list/tuple or a mapping with
                string keys, nested arbitrarily. Nodes are copied.

        Returns:
            The root node.

        Raises:
            TypeError: If a value or mapping key has an unsupported type.
        """
        if isinstance(data, Node):
            return data.copy()
        if data is None:
            return cls.null()
        if isinstance(data, bool):
            return cls.boolean(data)
        if isinstance(data, int | float):
            return cls.number(data)
        if isinstance(data, str):
            return cls.string(data)
        if isinstance(data, list | tuple):
            return cls.sequence([cls.from_python(item) for item in data])
        if isinstance(data, Mapping):
            children: dict[str, Node] = {}
            for key, value in data.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"mapping keys must be strings, got {type(key).__name__}"
                    )
                children[key] = cls.from_python(value)
            return cls.mapping(children)
        raise TypeError(f"unsupported value type: {type(data).__name__}")

    def to_python(self) -> Any:
        """Convert the node and its children to plain Python data."""
        if self.kind is NodeKind.SEQUENCE:
            return [item.to_python() for item in self.value]
        if self.kind is NodeKind.MAPPING:
            return {key: child.to_python() for key, child in self.value.items()}
        return self.value

    def copy(self) -> "Node":
        """Deep copy of this node."""
        if self.kind is NodeKind.SEQUENCE:
            return Node(NodeKind.SEQUENCE, [item.copy() for item in self.value])
        if self.kind is NodeKind.MAPPING:
            return Node(
                NodeKind.MAPPING,
                {key: child.copy() for key, child in self.value.items()},
            )
        return Node(self.kind, self.value)

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_null(self) -> bool:
        return self.kind is NodeKind.NULL

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is NodeKind.NUMBER:
            # int and float are distinct declared subtypes
            if type(self.value) is not type(other.value):
                return False
            if isinstance(self.value, float) and math.isnan(self.value):
                return math.isnan(other.value)
            return bool(self.value == other.value)
        if self.kind is NodeKind.SEQUENCE:
            return len(self.value) == len(other.value) and all(
                a == b for a, b in zip(self.value, other.value, strict=True)
            )
        if self.kind is NodeKind.MAPPING:
            if self.value.keys() != other.value.keys():
                return False
            return all(child == other.value[key] for key, child in self.value.items())
        return bool(self.value == other.value)

    def __repr__(self) -> str:
        return f"Node({self.kind.value}, {self.to_python()!r})"
