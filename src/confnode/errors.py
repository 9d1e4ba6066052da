"""Error types for configuration handling.

Every failure raised by the library derives from ``ConfigError`` so callers
can catch the whole family, or pick a specific class:

- ParseError: malformed input text
- SerializationError: a value the target format cannot represent
- ConfigIOError: unreadable or unwritable resource
- TypeMismatchError: a node cannot be coerced to the requested type
- ValidationError: a semantic constraint was violated
"""

from typing import Any


def format_path(path: tuple[str | int, ...] | None) -> str:
    """Render a node path for messages.

    Args:
        path: Path segments, or None.

    Returns:
        Dotted path with bracketed indices, ``<root>`` for the empty path.
    """
    if path is None:
        return ""
    if not path:
        return "<root>"
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


class ConfigError(Exception):
    """Base exception for configuration errors.

    Provides structured error information for logging and reporting.
    """

    def __init__(
        self,
        message: str,
        *,
        path: tuple[str | int, ...] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the configuration error.

        Args:
            message: Human-readable error message.
            path: Node path the error relates to, if any.
            details: Additional structured error details.
        """
        if path is not None:
            message = f"{message} (at {format_path(path)})"
        super().__init__(message)
        self.message = message
        self.path = path
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "path": format_path(self.path) if self.path is not None else None,
            "details": self.details,
        }


class ParseError(ConfigError):
    """Error parsing configuration text.

    Raised when input is not valid in the codec's format.
    """

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        source: str | None = None,
    ) -> None:
        """Initialize the parse error.

        Args:
            message: Human-readable error message.
            line: 1-based line number where parsing failed.
            column: 1-based column number where parsing failed.
            source: Name of the file or codec that produced the error.
        """
        details: dict[str, Any] = {}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        if source is not None:
            details["source"] = source

        location = ""
        if line is not None:
            location = f" at line {line}"
            if column is not None:
                location += f", column {column}"
        super().__init__(f"{message}{location}", details=details)
        self.line = line
        self.column = column
        self.source = source


class SerializationError(ConfigError):
    """Raised when a value cannot be represented in the target format."""


class ConfigIOError(ConfigError, OSError):
    """Raised when a configuration resource cannot be read or written."""

    def __init__(self, message: str, *, location: str | None = None) -> None:
        """Initialize the I/O error.

        Args:
            message: Human-readable error message.
            location: File path involved in the failure.
        """
        details: dict[str, Any] = {}
        if location is not None:
            details["location"] = location
        super().__init__(message, details=details)
        self.location = location

    def __str__(self) -> str:
        return self.message


class TypeMismatchError(ConfigError):
    """Raised when a node cannot be coerced to the requested type."""

    def __init__(
        self,
        message: str,
        *,
        path: tuple[str | int, ...] | None = None,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        """Initialize the type mismatch error.

        Args:
            message: Human-readable error message.
            path: Node path of the offending value.
            expected: Description of the expected type.
            actual: Description of what was found.
        """
        details: dict[str, Any] = {}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message, path=path, details=details)
        self.expected = expected
        self.actual = actual


class ValidationError(ConfigError):
    """Raised when a semantic constraint is violated.

    Examples are duplicate elements bound to a set, a missing required
    record field, or a negative sequence index.
    """
