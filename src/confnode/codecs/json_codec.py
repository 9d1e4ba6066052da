"""JSON codec (RFC 8259)."""

import json
import math
from typing import Any, Final

from confnode.codecs.base import CodecDescriptor, decode_text
from confnode.errors import ParseError, SerializationError
from confnode.node import ConfigTree, Node


JSON_DESCRIPTOR: Final = CodecDescriptor(
    name="json",
    extensions=(".json",),
    content_type="application/json",
)


def _unique_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ParseError(f"duplicate object key {key!r}", source="json")
        result[key] = value
    return result


def _reject_constant(name: str) -> Any:
    raise ParseError(f"non-standard constant {name!r}", source="json")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ParseError(f"number out of range: {text}", source="json")
    return value


class JsonCodec:
    """Reads and writes strict JSON documents."""

    def __init__(self, indent: int = 2) -> None:
        """Initialize the codec.

        Args:
            indent: Spaces per nesting level; 0 writes compact output.
        """
        self._indent = indent

    @property
    def descriptor(self) -> CodecDescriptor:
        return JSON_DESCRIPTOR

    def parse(self, data: bytes) -> ConfigTree:
        text = decode_text(data, "json")
        if not text.strip():
            return ConfigTree()

        try:
            parsed = json.loads(
                text,
                object_pairs_hook=_unique_pairs,
                parse_constant=_reject_constant,
                parse_float=_finite_float,
            )
        except json.JSONDecodeError as e:
            raise ParseError(e.msg, line=e.lineno, column=e.colno, source="json") from e
        return ConfigTree(Node.from_python(parsed))

    def serialize(self, tree: ConfigTree) -> bytes:
        try:
            text = json.dumps(
                tree.to_python(),
                indent=self._indent or None,
                ensure_ascii=False,
                allow_nan=False,
            )
        except ValueError as e:
            raise SerializationError(f"value not representable in JSON: {e}") from e
        return (text + "\n").encode("utf-8")
