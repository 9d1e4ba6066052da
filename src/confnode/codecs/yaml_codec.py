"""YAML 1.1 codec backed by PyYAML's safe loader and dumper."""

from datetime import date, datetime
from typing import Any, Final

import yaml
from yaml.constructor import ConstructorError

from confnode.codecs.base import CodecDescriptor, decode_text
from confnode.errors import ParseError, SerializationError
from confnode.node import ABSENT, ConfigTree, Node


YAML_DESCRIPTOR: Final = CodecDescriptor(
    name="yaml",
    extensions=(".yaml", ".yml"),
    content_type="application/yaml",
)

_MERGE_TAG: Final = "tag:yaml.org,2002:merge"

# Line breaks YAML 1.1 folds outside double quotes, plus the byte order mark
_FOLDED_BREAKS: Final = frozenset("\x85\u2028\u2029\ufeff")


def _key_text(key: Any) -> str | None:
    """Text form of a scalar mapping key, or None when it has none."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, datetime | date):
        return key.isoformat()
    if isinstance(key, int | float):
        return str(key)
    return None


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader building mappings with string keys.

    Keys are turned into text before insertion, so ``1`` and ``1.0`` stay
    separate entries and a key repeated in one mapping is an error. Keys
    pulled in through ``<<`` merges may still be overridden.
    """

    def construct_mapping(
        self, node: yaml.MappingNode, deep: bool = False
    ) -> dict[Any, Any]:
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(
                None,
                None,
                f"expected a mapping node, but found {node.id}",
                node.start_mark,
            )
        own_count = sum(1 for key_node, _ in node.value if key_node.tag != _MERGE_TAG)
        self.flatten_mapping(node)
        merged_count = len(node.value) - own_count

        mapping: dict[str, Any] = {}
        own_keys: set[str] = set()
        for index, (key_node, value_node) in enumerate(node.value):
            key = _key_text(self.construct_object(key_node, deep=deep))
            if key is None:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found unsupported mapping key",
                    key_node.start_mark,
                )
            if index >= merged_count:
                if key in own_keys:
                    raise ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key {key!r}",
                        key_node.start_mark,
                    )
                own_keys.add(key)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


class _ConfigDumper(yaml.SafeDumper):
    """Safe dumper that double-quotes strings holding folding line breaks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style = '"' if any(ch in _FOLDED_BREAKS for ch in data) else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_ConfigDumper.add_representer(str, _represent_str)


def _to_node(value: Any) -> Node:
    """Convert a safe-loaded YAML value into a node."""
    if value is None:
        return Node.null()
    if isinstance(value, bool):
        return Node.boolean(value)
    if isinstance(value, int | float):
        return Node.number(value)
    if isinstance(value, str):
        return Node.string(value)
    # Timestamps have no node variant; keep their text form
    if isinstance(value, datetime | date):
        return Node.string(value.isoformat())
    if isinstance(value, list):
        return Node.sequence([_to_node(item) for item in value])
    if isinstance(value, dict):
        return Node.mapping({str(k): _to_node(v) for k, v in value.items()})
    raise ParseError(
        f"unsupported YAML value of type {type(value).__name__}", source="yaml"
    )


def _load_document(text: str) -> Any:
    """Load a single document, returning ``ABSENT`` for an empty stream.

    An empty stream (or one holding only comments) differs from an
    explicit ``null`` document.
    """
    loader = _ConfigLoader(text)
    try:
        document = loader.get_single_node()
        if document is None:
            return ABSENT
        return loader.construct_document(document)
    finally:
        loader.dispose()


class YamlCodec:
    """Reads and writes single-document YAML."""

    def __init__(self, indent: int = 2) -> None:
        """Initialize the codec.

        Args:
            indent: Spaces per nesting level.
        """
        self._indent = indent

    @property
    def descriptor(self) -> CodecDescriptor:
        return YAML_DESCRIPTOR

    def parse(self, data: bytes) -> ConfigTree:
        text = decode_text(data, "yaml")
        try:
            parsed = _load_document(text)
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            raise ParseError(
                e.problem or str(e),
                line=mark.line + 1 if mark else None,
                column=mark.column + 1 if mark else None,
                source="yaml",
            ) from e
        except yaml.YAMLError as e:
            raise ParseError(str(e), source="yaml") from e

        if parsed is ABSENT:
            return ConfigTree()
        return ConfigTree(_to_node(parsed))

    def serialize(self, tree: ConfigTree) -> bytes:
        try:
            text = yaml.dump(
                tree.to_python(),
                Dumper=_ConfigDumper,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
                indent=self._indent,
            )
        except yaml.YAMLError as e:
            raise SerializationError(f"value not representable in YAML: {e}") from e
        return text.encode("utf-8")
