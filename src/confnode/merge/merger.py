"""Layering of default and override trees.

Mappings present on both sides are merged key by key. Everything else,
sequences included, is replaced outright by the override: concatenating
lists would make configuration diffs unpredictable.
"""

from confnode.errors import TypeMismatchError
from confnode.node import ConfigTree, Node, NodeKind


def _merge_nodes(default: Node, override: Node) -> Node:
    if default.kind is NodeKind.MAPPING and override.kind is NodeKind.MAPPING:
        merged: dict[str, Node] = {
            key: child.copy() for key, child in default.value.items()
        }
        for key, child in override.value.items():
            if key in merged:
                merged[key] = _merge_nodes(merged[key], child)
            else:
                merged[key] = child.copy()
        return Node.mapping(merged)
    return override.copy()


def merge(default_tree: ConfigTree, override_tree: ConfigTree) -> ConfigTree:
    """Layer ``override_tree`` on top of ``default_tree``.

    Neither input is modified.

    Args:
        default_tree: Tree of default values.
        override_tree: Tree of user-supplied values.

    Returns:
        New merged tree.

    Raises:
        TypeMismatchError: If exactly one of the roots is a mapping.
    """
    default_root = default_tree.root
    override_root = override_tree.root
    default_is_mapping = default_root.kind is NodeKind.MAPPING
    if default_is_mapping != (override_root.kind is NodeKind.MAPPING):
        raise TypeMismatchError(
            "cannot merge trees with incompatible roots",
            path=(),
            expected=default_root.kind.value,
            actual=override_root.kind.value,
        )
    return ConfigTree(_merge_nodes(default_root, override_root))


def merge_all(*trees: ConfigTree) -> ConfigTree:
    """Merge trees left to right; later trees take precedence."""
    if not trees:
        return ConfigTree()
    result = trees[0].copy()
    for tree in trees[1:]:
        result = merge(result, tree)
    return result
