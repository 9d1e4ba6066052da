"""Unit tests for the JSON codec."""

import json

import pytest

from confnode.codecs import JsonCodec
from confnode.errors import ParseError, SerializationError
from confnode.node import ConfigTree, Node, NodeKind


@pytest.fixture
def codec() -> JsonCodec:
    """Create a JSON codec."""
    return JsonCodec()


class TestJsonParse:
    """Tests for JSON parsing."""

    @pytest.mark.unit
    def test_parse_object(self, codec: JsonCodec) -> None:
        """Objects become mapping trees with typed scalars."""
        tree = codec.parse(b'{"port": 25565, "ratio": 0.5, "on": true, "x": null}')

        assert tree.get("port") == Node.number(25565)
        assert tree.get("ratio") == Node.number(0.5)
        assert tree.get("on") == Node.boolean(True)
        assert tree.get("x") == Node.null()

    @pytest.mark.unit
    def test_parse_preserves_key_order(self, codec: JsonCodec) -> None:
        """Mapping insertion order follows the document."""
        tree = codec.parse(b'{"b": 1, "a": 2, "c": 3}')

        assert list(tree.root.value) == ["b", "a", "c"]

    @pytest.mark.unit
    def test_parse_array_root(self, codec: JsonCodec) -> None:
        """Non-object roots are allowed."""
        tree = codec.parse(b"[1, 2]")

        assert tree.root.kind is NodeKind.SEQUENCE

    @pytest.mark.unit
    @pytest.mark.parametrize("data", [b"", b"   \n\t "])
    def test_empty_input_is_empty_mapping(self, codec: JsonCodec, data: bytes) -> None:
        """Empty input parses to an empty tree."""
        assert codec.parse(data) == ConfigTree()

    @pytest.mark.unit
    def test_bom_is_accepted(self, codec: JsonCodec) -> None:
        """A UTF-8 byte order mark is skipped."""
        tree = codec.parse(b'\xef\xbb\xbf{"a": "\xc3\xa9"}')

        assert tree.get_value("a") == "é"

    @pytest.mark.unit
    def test_malformed_input_reports_position(self, codec: JsonCodec) -> None:
        """Syntax errors carry a 1-based line and column."""
        with pytest.raises(ParseError) as exc_info:
            codec.parse(b"{ key: ")

        assert exc_info.value.line == 1
        assert exc_info.value.column is not None
        assert exc_info.value.source == "json"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "data",
        [b'{"a": NaN}', b'{"a": Infinity}', b'{"a": -Infinity}', b'{"a": 1e999}'],
    )
    def test_non_finite_numbers_rejected(self, codec: JsonCodec, data: bytes) -> None:
        """Non-standard constants and overflowing numbers are parse errors."""
        with pytest.raises(ParseError):
            codec.parse(data)

    @pytest.mark.unit
    def test_duplicate_keys_rejected(self, codec: JsonCodec) -> None:
        """Duplicate object keys are parse errors."""
        with pytest.raises(ParseError, match="duplicate"):
            codec.parse(b'{"a": 1, "a": 2}')

    @pytest.mark.unit
    def test_invalid_utf8_rejected(self, codec: JsonCodec) -> None:
        """Undecodable bytes are parse errors."""
        with pytest.raises(ParseError, match="UTF-8"):
            codec.parse(b'{"a": "\xff"}')


class TestJsonSerialize:
    """Tests for JSON serialization."""

    @pytest.mark.unit
    def test_serialize_pretty(self, codec: JsonCodec) -> None:
        """Output is indented, UTF-8 and newline terminated."""
        tree = ConfigTree.from_python({"name": "café", "n": [1]})
        output = codec.serialize(tree)

        assert output.endswith(b"\n")
        assert "café".encode() in output
        assert json.loads(output) == {"name": "café", "n": [1]}
        assert b'\n  "name"' in output

    @pytest.mark.unit
    def test_serialize_compact(self) -> None:
        """Indent 0 writes a single line."""
        output = JsonCodec(indent=0).serialize(ConfigTree.from_python({"a": [1, 2]}))

        assert output == b'{"a": [1, 2]}\n'

    @pytest.mark.unit
    def test_serialize_non_finite_fails(self, codec: JsonCodec) -> None:
        """NaN cannot be written as JSON."""
        tree = ConfigTree.from_python({"a": float("nan")})

        with pytest.raises(SerializationError):
            codec.serialize(tree)

    @pytest.mark.unit
    def test_round_trip(self, codec: JsonCodec) -> None:
        """Parsing serialized output yields an equal tree."""
        tree = ConfigTree.from_python(
            {"a": {"b": [1, 2.5, None, "x"], "c": {}}, "d": [], "e": False}
        )

        assert codec.parse(codec.serialize(tree)) == tree

    @pytest.mark.unit
    def test_descriptor(self, codec: JsonCodec) -> None:
        """The descriptor names the format."""
        assert codec.descriptor.name == "json"
        assert codec.descriptor.extensions == (".json",)
