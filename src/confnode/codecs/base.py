"""Codec interface shared by all format backends."""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from confnode.errors import ParseError
from confnode.node import ConfigTree


class CodecDescriptor(BaseModel):
    """Identifies a format backend.

    Attributes:
        name: Short codec name (e.g. ``yaml``).
        extensions: File extensions handled, lowercase with leading dot.
        content_type: MIME type of the format.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, pattern=r"^[a-z0-9_-]+$")
    extensions: tuple[str, ...] = Field(min_length=1)
    content_type: str


@runtime_checkable
class Codec(Protocol):
    """Protocol for format codecs.

    Any object exposing a ``descriptor`` and a ``parse``/``serialize`` pair
    can be registered, regardless of the backing library.
    """

    @property
    def descriptor(self) -> CodecDescriptor:
        """Describe the backend."""
        ...

    def parse(self, data: bytes) -> ConfigTree:
        """Parse raw bytes into a tree.

        Raises:
            ParseError: If the input is malformed.
        """
        ...

    def serialize(self, tree: ConfigTree) -> bytes:
        """Serialize a tree to raw bytes.

        Raises:
            SerializationError: If a value cannot be represented.
        """
        ...


def decode_text(data: bytes, source: str) -> str:
    """Decode UTF-8 input, accepting a byte order mark.

    Args:
        data: Raw input.
        source: Codec name for error reporting.

    Returns:
        Decoded text.

    Raises:
        ParseError: If the input is not valid UTF-8.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"input is not valid UTF-8: {e.reason}", source=source
        ) from e
