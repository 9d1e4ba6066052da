"""Unit tests for the node model."""

import pytest

from confnode.node import ABSENT, Node, NodeKind
from confnode.node.models import AbsentType


class TestNodeConstruction:
    """Tests for node constructors."""

    @pytest.mark.unit
    def test_scalar_constructors(self) -> None:
        """Each constructor sets the matching kind."""
        assert Node.null().kind is NodeKind.NULL
        assert Node.boolean(True).kind is NodeKind.BOOLEAN
        assert Node.number(3).kind is NodeKind.NUMBER
        assert Node.number(3.5).kind is NodeKind.NUMBER
        assert Node.string("x").kind is NodeKind.STRING

    @pytest.mark.unit
    def test_number_rejects_bool(self) -> None:
        """Booleans are not numbers."""
        with pytest.raises(TypeError):
            Node.number(True)

    @pytest.mark.unit
    def test_from_python_nested(self) -> None:
        """Nested plain data converts recursively."""
        node = Node.from_python({"a": [1, 2.5, None, "x", True], "b": {}})

        assert node.kind is NodeKind.MAPPING
        items = node.value["a"].value
        assert [item.kind for item in items] == [
            NodeKind.NUMBER,
            NodeKind.NUMBER,
            NodeKind.NULL,
            NodeKind.STRING,
            NodeKind.BOOLEAN,
        ]
        assert node.value["b"].kind is NodeKind.MAPPING

    @pytest.mark.unit
    def test_from_python_rejects_non_string_keys(self) -> None:
        """Mapping keys must be strings."""
        with pytest.raises(TypeError):
            Node.from_python({1: "a"})

    @pytest.mark.unit
    def test_from_python_rejects_unknown_types(self) -> None:
        """Arbitrary objects are not representable."""
        with pytest.raises(TypeError):
            Node.from_python({"a": object()})

    @pytest.mark.unit
    def test_to_python_round_trip(self) -> None:
        """to_python returns the original plain data."""
        data = {"server": {"port": 25565, "tags": ["a", "b"], "ratio": 0.5}}
        assert Node.from_python(data).to_python() == data

    @pytest.mark.unit
    def test_copy_is_deep(self) -> None:
        """Mutating a copy leaves the original untouched."""
        original = Node.from_python({"a": [1]})
        clone = original.copy()
        clone.value["a"].value.append(Node.number(2))

        assert original.to_python() == {"a": [1]}


class TestNodeEquality:
    """Tests for structural equality."""

    @pytest.mark.unit
    def test_mapping_order_ignored(self) -> None:
        """Key order does not affect equality."""
        assert Node.from_python({"a": 1, "b": 2}) == Node.from_python({"b": 2, "a": 1})

    @pytest.mark.unit
    def test_sequence_order_matters(self) -> None:
        """Sequence order affects equality."""
        assert Node.from_python([1, 2]) != Node.from_python([2, 1])

    @pytest.mark.unit
    def test_int_and_float_are_distinct(self) -> None:
        """Numbers keep their declared subtype."""
        assert Node.number(1) != Node.number(1.0)

    @pytest.mark.unit
    def test_bool_is_not_number(self) -> None:
        """True is not equal to 1."""
        assert Node.boolean(True) != Node.number(1)

    @pytest.mark.unit
    def test_nan_equals_nan(self) -> None:
        """NaN nodes compare equal so trees holding them round-trip."""
        assert Node.number(float("nan")) == Node.number(float("nan"))

    @pytest.mark.unit
    def test_nodes_are_unhashable(self) -> None:
        """Mutable nodes cannot be hashed."""
        with pytest.raises(TypeError):
            hash(Node.null())


class TestAbsent:
    """Tests for the ABSENT marker."""

    @pytest.mark.unit
    def test_singleton(self) -> None:
        """Only one ABSENT instance exists."""
        assert AbsentType() is ABSENT

    @pytest.mark.unit
    def test_falsy_and_distinct_from_null(self) -> None:
        """ABSENT is falsy and never equal to a null node."""
        assert not ABSENT
        assert ABSENT != Node.null()
        assert repr(ABSENT) == "ABSENT"
