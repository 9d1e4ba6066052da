"""Loading and saving configuration trees."""

from pathlib import Path

import structlog

from confnode.codecs import Codec, CodecRegistry, default_registry
from confnode.errors import ConfigIOError
from confnode.io.atomic import AtomicWriter, WrittenFile
from confnode.node import ConfigTree


logger = structlog.get_logger()


def _resolve_codec(
    location: Path,
    codec: Codec | str | None,
    registry: CodecRegistry | None,
) -> Codec:
    if codec is not None and not isinstance(codec, str):
        return codec
    registry = registry or default_registry()
    if isinstance(codec, str):
        return registry.by_name(codec)
    return registry.for_path(location)


def read_source(source: Path | str) -> bytes:
    """Read raw bytes from a file.

    Raises:
        ConfigIOError: If the file cannot be read.
    """
    path = Path(source)
    try:
        with path.open("rb") as handle:
            return handle.read()
    except OSError as e:
        raise ConfigIOError(
            f"cannot read {path}: {e.strerror or e}", location=str(path)
        ) from e


def load(
    source: Path | str,
    codec: Codec | str | None = None,
    *,
    registry: CodecRegistry | None = None,
) -> ConfigTree:
    """Load a configuration file into a new tree.

    Args:
        source: File to read.
        codec: Codec instance or name; inferred from the extension when omitted.
        registry: Registry for name/extension lookup.

    Returns:
        Independently owned tree.

    Raises:
        ConfigIOError: If the file cannot be read.
        ParseError: If the content is malformed.
        ValidationError: If no codec matches.
    """
    path = Path(source)
    selected = _resolve_codec(path, codec, registry)
    log = logger.bind(
        component="loader", path=str(path), codec=selected.descriptor.name
    )

    content = read_source(path)
    tree = selected.parse(content)
    log.debug("config_loaded", bytes=len(content))
    return tree


def save(
    tree: ConfigTree,
    destination: Path | str,
    codec: Codec | str | None = None,
    *,
    registry: CodecRegistry | None = None,
) -> WrittenFile:
    """Serialize a tree and write it atomically.

    Serialization happens before the file is touched, so a failing value
    leaves any existing file intact.

    Args:
        tree: Tree to save.
        destination: File to write; parent folders are created.
        codec: Codec instance or name; inferred from the extension when omitted.
        registry: Registry for name/extension lookup.

    Returns:
        Information about the written file.

    Raises:
        ConfigIOError: If the file cannot be written.
        SerializationError: If the tree holds unrepresentable values.
        ValidationError: If no codec matches.
    """
    path = Path(destination)
    selected = _resolve_codec(path, codec, registry)
    content = selected.serialize(tree)
    written = AtomicWriter().write(path, content)
    logger.debug(
        "config_saved",
        component="saver",
        path=str(path),
        codec=selected.descriptor.name,
        bytes=written.bytes_written,
    )
    return written


def loads(
    text: str | bytes,
    codec: Codec | str,
    *,
    registry: CodecRegistry | None = None,
) -> ConfigTree:
    """Parse in-memory text with the given codec."""
    selected = _resolve_codec(Path(), codec, registry)
    data = text.encode("utf-8") if isinstance(text, str) else text
    return selected.parse(data)


def dumps(
    tree: ConfigTree,
    codec: Codec | str,
    *,
    registry: CodecRegistry | None = None,
) -> str:
    """Serialize a tree to text with the given codec."""
    selected = _resolve_codec(Path(), codec, registry)
    return selected.serialize(tree).decode("utf-8")
