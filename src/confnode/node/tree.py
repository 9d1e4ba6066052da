"""Configuration tree with path-based access."""

from collections.abc import Iterator
from typing import Any

from confnode.errors import TypeMismatchError, ValidationError
from confnode.node.models import ABSENT, AbsentType, Node, NodeKind
from confnode.node.path import NodePath, PathLike, PathSegment, as_path


def _child(node: Node, segment: PathSegment) -> Node | AbsentType:
    if isinstance(segment, str):
        if node.kind is NodeKind.MAPPING:
            return node.value.get(segment, ABSENT)
        return ABSENT
    if node.kind is NodeKind.SEQUENCE and 0 <= segment < len(node.value):
        return node.value[segment]
    return ABSENT


def _empty_container(segment: PathSegment) -> Node:
    return Node.mapping() if isinstance(segment, str) else Node.sequence()


class ConfigTree:
    """An independently owned tree of configuration nodes.

    Reads never fail on missing paths: ``get`` returns ``ABSENT`` instead.
    Writes create intermediate mappings (for key segments) and sequences
    (for index segments) as needed.

    Not safe for concurrent mutation; callers sharing a tree across threads
    must serialize access themselves.
    """

    def __init__(self, root: Node | None = None) -> None:
        """Initialize the tree.

        Args:
            root: Root node to take ownership of. Defaults to an empty mapping.
        """
        self._root = root if root is not None else Node.mapping()

    @classmethod
    def from_python(cls, data: Any) -> "ConfigTree":
        """Build a tree from plain Python data.

        Raises:
            TypeMismatchError: If the data contains unsupported values.
        """
        try:
            return cls(Node.from_python(data))
        except TypeError as e:
            raise TypeMismatchError(str(e)) from e

    @property
    def root(self) -> Node:
        return self._root

    def is_empty(self) -> bool:
        """True when the root is an empty mapping or NULL."""
        if self._root.kind is NodeKind.MAPPING:
            return not self._root.value
        return self._root.is_null

    def get(self, path: PathLike = ()) -> Node | AbsentType:
        """Return the node at ``path``, or ``ABSENT`` when there is none."""
        node: Node | AbsentType = self._root
        for segment in as_path(path):
            if not isinstance(node, Node):
                break
            node = _child(node, segment)
        return node

    def has_path(self, path: PathLike) -> bool:
        return self.get(path) is not ABSENT

    def get_value(self, path: PathLike, default: Any = None) -> Any:
        """Return the plain Python value at ``path``, or ``default`` if absent."""
        node = self.get(path)
        if isinstance(node, Node):
            return node.to_python()
        return default

    def set(self, path: PathLike, value: Node | Any) -> None:
        """Set the node at ``path``, creating intermediate structure.

        Args:
            path: Target path.
            value: Node (copied) or plain Python data.

        Raises:
            TypeMismatchError: If the path descends through a node of the
                wrong kind, or the value cannot be represented.
            ValidationError: If the path contains a negative index.
        """
        segments = as_path(path)
        if isinstance(value, Node):
            node = value.copy()
        else:
            node = self._to_node(value, segments)

        if not segments:
            self._root = node
            return

        parent = self._root
        walked: list[PathSegment] = []
        for index, segment in enumerate(segments[:-1]):
            walked.append(segment)
            existing = _child(parent, segment)
            if isinstance(existing, Node) and not existing.is_null:
                parent = existing
                continue
            self._check_container(parent, segment, tuple(walked[:-1]))
            created = _empty_container(segments[index + 1])
            self._put(parent, segment, created)
            parent = created
        self._check_container(parent, segments[-1], tuple(walked))
        self._put(parent, segments[-1], node)

    def remove(self, path: PathLike) -> bool:
        """Remove the node at ``path``.

        Removing a sequence element shifts later elements down. Removing the
        root resets the tree to an empty mapping.

        Returns:
            True if a node was removed.
        """
        segments = as_path(path)
        if not segments:
            self._root = Node.mapping()
            return True

        parent = self.get(segments[:-1])
        if not isinstance(parent, Node) or _child(parent, segments[-1]) is ABSENT:
            return False
        del parent.value[segments[-1]]
        return True

    def walk(self) -> Iterator[tuple[NodePath, Node]]:
        """Lazily yield ``(path, node)`` pairs in pre-order, root first."""
        stack: list[tuple[NodePath, Node]] = [((), self._root)]
        while stack:
            path, node = stack.pop()
            yield path, node
            if node.kind is NodeKind.MAPPING:
                children = [(path + (key,), child) for key, child in node.value.items()]
            elif node.kind is NodeKind.SEQUENCE:
                children = [(path + (i,), child) for i, child in enumerate(node.value)]
            else:
                continue
            stack.extend(reversed(children))

    def __iter__(self) -> Iterator[tuple[NodePath, Node]]:
        return self.walk()

    def to_python(self) -> Any:
        return self._root.to_python()

    def copy(self) -> "ConfigTree":
        return ConfigTree(self._root.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigTree):
            return NotImplemented
        return self._root == other._root

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigTree({self.to_python()!r})"

    @staticmethod
    def _to_node(value: Any, path: NodePath) -> Node:
        try:
            return Node.from_python(value)
        except TypeError as e:
            raise TypeMismatchError(str(e), path=path) from e

    @staticmethod
    def _check_container(
        parent: Node, segment: PathSegment, parent_path: NodePath
    ) -> None:
        if isinstance(segment, str):
            if parent.kind is not NodeKind.MAPPING:
                raise TypeMismatchError(
                    f"cannot set key {segment!r} on a {parent.kind.value} node",
                    path=parent_path,
                    expected=NodeKind.MAPPING.value,
                    actual=parent.kind.value,
                )
            return
        if parent.kind is not NodeKind.SEQUENCE:
            raise TypeMismatchError(
                f"cannot set index {segment} on a {parent.kind.value} node",
                path=parent_path,
                expected=NodeKind.SEQUENCE.value,
                actual=parent.kind.value,
            )
        if segment < 0:
            raise ValidationError(f"negative index {segment}", path=parent_path)

    @staticmethod
    def _put(parent: Node, segment: PathSegment, node: Node) -> None:
        if isinstance(segment, str):
            parent.value[segment] = node
            return
        items: list[Node] = parent.value
        # Pad with NULL so the index becomes addressable
        while len(items) < segment:
            items.append(Node.null())
        if segment == len(items):
            items.append(node)
        else:
            items[segment] = node
