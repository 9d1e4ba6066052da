"""Format-agnostic configuration node tree."""

from confnode.node.models import ABSENT, AbsentType, Node, NodeKind
from confnode.node.path import NodePath, PathLike, as_path, node_path, parse_path
from confnode.node.tree import ConfigTree


__all__ = [
    "ABSENT",
    "AbsentType",
    "ConfigTree",
    "Node",
    "NodeKind",
    "NodePath",
    "PathLike",
    "as_path",
    "node_path",
    "parse_path",
]
