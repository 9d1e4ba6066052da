"""HOCON codec.

Parsing is delegated to pyhocon, which resolves substitutions. Output is
written with quoted keys and quoted strings restricted to the escapes the
parser decodes, so every written tree reads back unchanged.
"""

import math
from collections.abc import Mapping
from typing import Any, Final

from pyhocon import ConfigFactory
from pyhocon.config_tree import NoneValue
from pyhocon.exceptions import ConfigException
from pyparsing import ParseBaseException

from confnode.codecs.base import CodecDescriptor, decode_text
from confnode.errors import ParseError, SerializationError
from confnode.node import ConfigTree, Node, NodeKind


HOCON_DESCRIPTOR: Final = CodecDescriptor(
    name="hocon",
    extensions=(".conf", ".hocon"),
    content_type="application/hocon",
)

# Escapes understood inside quoted strings on read
_ESCAPES: Final = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _to_node(value: Any) -> Node:
    """Convert a resolved pyhocon value into a node."""
    if value is None or isinstance(value, NoneValue):
        return Node.null()
    if isinstance(value, bool):
        return Node.boolean(value)
    if isinstance(value, int | float):
        return Node.number(value)
    if isinstance(value, str):
        return Node.string(value)
    if isinstance(value, list):
        return Node.sequence([_to_node(item) for item in value])
    if isinstance(value, Mapping):
        return Node.mapping({_key_name(k): _to_node(v) for k, v in value.items()})
    raise ParseError(
        f"unresolved HOCON value of type {type(value).__name__}", source="hocon"
    )


def _key_name(key: Any) -> str:
    """Key text without the quotes pyhocon keeps on keys with special characters."""
    text = str(key)
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _quote(text: str) -> str:
    """Quote a string value using only the escapes pyhocon decodes.

    Other control characters are written raw, since HOCON quoted strings
    may hold them and ``\\uXXXX`` escapes are not decoded on read. Tabs are
    escaped because the parser expands raw tabs to spaces.
    """
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


def _quote_key(key: str, path: tuple[str | int, ...]) -> str:
    """Quote a key, rejecting text that cannot be read back unchanged.

    Keys are never unescaped on read, so they cannot hold quotes,
    backslashes or control characters, and an empty quoted key is a
    syntax error.
    """
    if not key or any(ch in '"\\' or ch < " " for ch in key):
        raise SerializationError(f"HOCON cannot represent key {key!r}", path=path)
    return f'"{key}"'


class HoconCodec:
    """Reads and writes HOCON documents whose root is an object."""

    def __init__(self, indent: int = 2) -> None:
        """Initialize the codec.

        Args:
            indent: Spaces per nesting level.
        """
        self._indent = indent

    @property
    def descriptor(self) -> CodecDescriptor:
        return HOCON_DESCRIPTOR

    def parse(self, data: bytes) -> ConfigTree:
        text = decode_text(data, "hocon")
        if not text.strip():
            return ConfigTree()

        try:
            parsed = ConfigFactory.parse_string(text)
        except ParseBaseException as e:
            raise ParseError(
                e.msg or str(e),
                line=getattr(e, "lineno", None),
                column=getattr(e, "col", None),
                source="hocon",
            ) from e
        except ConfigException as e:
            raise ParseError(str(e), source="hocon") from e
        return ConfigTree(_to_node(parsed))

    def serialize(self, tree: ConfigTree) -> bytes:
        root = tree.root
        if root.kind is not NodeKind.MAPPING:
            raise SerializationError(
                f"HOCON documents must have an object root, got {root.kind.value}",
                path=(),
            )
        if not root.value:
            return b"{}\n"

        lines: list[str] = []
        self._write_members(root, 0, lines, ())
        return ("\n".join(lines) + "\n").encode("utf-8")

    def _write_members(
        self,
        node: Node,
        level: int,
        lines: list[str],
        path: tuple[str | int, ...],
    ) -> None:
        pad = " " * (self._indent * level)
        for key, child in node.value.items():
            child_path = path + (key,)
            rendered = self._render(child, level, child_path)
            separator = " " if child.kind is NodeKind.MAPPING else " = "
            lines.append(
                f"{pad}{_quote_key(key, child_path)}{separator}{rendered}"
            )

    def _render(self, node: Node, level: int, path: tuple[str | int, ...]) -> str:
        """Render a value whose first line continues the current line."""
        if node.kind is NodeKind.NULL:
            return "null"
        if node.kind is NodeKind.BOOLEAN:
            return "true" if node.value else "false"
        if node.kind is NodeKind.NUMBER:
            if isinstance(node.value, float):
                if not math.isfinite(node.value):
                    raise SerializationError(
                        f"HOCON cannot represent {node.value!r}", path=path
                    )
                return repr(node.value)
            return str(node.value)
        if node.kind is NodeKind.STRING:
            return _quote(node.value)

        closing_pad = " " * (self._indent * level)
        if node.kind is NodeKind.MAPPING:
            if not node.value:
                return "{}"
            inner: list[str] = []
            self._write_members(node, level + 1, inner, path)
            return "{\n" + "\n".join(inner) + f"\n{closing_pad}}}"

        if not node.value:
            return "[]"
        item_pad = " " * (self._indent * (level + 1))
        items = [
            item_pad + self._render(item, level + 1, path + (index,))
            for index, item in enumerate(node.value)
        ]
        return "[\n" + ",\n".join(items) + f"\n{closing_pad}]"
