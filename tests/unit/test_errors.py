"""Unit tests for error types."""

import pytest

from confnode.errors import (
    ConfigError,
    ConfigIOError,
    ParseError,
    SerializationError,
    TypeMismatchError,
    ValidationError,
    format_path,
)


class TestFormatPath:
    """Tests for path rendering."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (None, ""),
            ((), "<root>"),
            (("server", "port"), "server.port"),
            (("servers", 0, "host"), "servers[0].host"),
            ((1, 2), "[1][2]"),
        ],
    )
    def test_format(self, path: tuple[str | int, ...] | None, expected: str) -> None:
        """Paths render as dotted strings with bracketed indices."""
        assert format_path(path) == expected


class TestErrorHierarchy:
    """Tests for error classes."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error",
        [
            ParseError("bad"),
            SerializationError("bad"),
            ConfigIOError("bad"),
            TypeMismatchError("bad"),
            ValidationError("bad"),
        ],
    )
    def test_all_derive_from_config_error(self, error: ConfigError) -> None:
        """Every library error is a ConfigError."""
        assert isinstance(error, ConfigError)

    @pytest.mark.unit
    def test_io_error_is_oserror(self) -> None:
        """ConfigIOError can be caught as OSError."""
        error = ConfigIOError("cannot read x", location="/tmp/x")

        assert isinstance(error, OSError)
        assert str(error) == "cannot read x"
        assert error.details == {"location": "/tmp/x"}

    @pytest.mark.unit
    def test_parse_error_position(self) -> None:
        """ParseError appends its position to the message."""
        error = ParseError("unexpected token", line=3, column=7, source="yaml")

        assert str(error) == "unexpected token at line 3, column 7"
        assert error.details == {"line": 3, "column": 7, "source": "yaml"}

    @pytest.mark.unit
    def test_path_in_message(self) -> None:
        """Errors with a path mention it."""
        error = TypeMismatchError(
            "cannot read", path=("server", "port"), expected="int", actual="string"
        )

        assert str(error) == "cannot read (at server.port)"

    @pytest.mark.unit
    def test_to_dict(self) -> None:
        """to_dict gives a structured view for logging."""
        error = TypeMismatchError(
            "cannot read", path=("a", 0), expected="int", actual="string"
        )

        assert error.to_dict() == {
            "error_type": "TypeMismatchError",
            "message": "cannot read (at a[0])",
            "path": "a[0]",
            "details": {"expected": "int", "actual": "string"},
        }
