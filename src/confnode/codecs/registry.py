"""Static codec registry."""

from pathlib import Path

import structlog

from confnode.codecs.base import Codec
from confnode.codecs.hocon_codec import HoconCodec
from confnode.codecs.json_codec import JsonCodec
from confnode.codecs.yaml_codec import YamlCodec
from confnode.errors import ValidationError
from confnode.settings import LibrarySettings, get_settings


logger = structlog.get_logger()


class CodecRegistry:
    """Maps codec names and file extensions to codecs.

    The set of codecs is fixed at construction time.
    """

    def __init__(self, codecs: list[Codec], default: str | None = None) -> None:
        """Initialize the registry.

        Args:
            codecs: Codecs to register; names and extensions must be unique.
            default: Name of the codec used when none can be inferred.

        Raises:
            ValidationError: If names or extensions collide, or the default
                is not registered.
        """
        self._by_name: dict[str, Codec] = {}
        self._by_extension: dict[str, Codec] = {}
        for codec in codecs:
            descriptor = codec.descriptor
            if descriptor.name in self._by_name:
                raise ValidationError(f"duplicate codec name: {descriptor.name}")
            self._by_name[descriptor.name] = codec
            for extension in descriptor.extensions:
                extension = extension.lower()
                if extension in self._by_extension:
                    raise ValidationError(f"duplicate codec extension: {extension}")
                self._by_extension[extension] = codec

        if default is not None and default not in self._by_name:
            raise ValidationError(f"default codec is not registered: {default}")
        self._default = default

    @property
    def names(self) -> list[str]:
        return list(self._by_name)

    def by_name(self, name: str) -> Codec:
        """Get a codec by name.

        Raises:
            ValidationError: If no codec has that name.
        """
        codec = self._by_name.get(name.lower())
        if codec is None:
            raise ValidationError(
                f"unknown codec {name!r}; known codecs: {', '.join(self._by_name)}"
            )
        return codec

    def by_extension(self, extension: str) -> Codec:
        """Get a codec by file extension (with or without the leading dot).

        Raises:
            ValidationError: If no codec handles the extension.
        """
        normalized = extension.lower()
        if not normalized.startswith("."):
            normalized = f".{normalized}"
        codec = self._by_extension.get(normalized)
        if codec is None:
            raise ValidationError(f"no codec registered for extension {normalized!r}")
        return codec

    def for_path(self, path: Path | str) -> Codec:
        """Select a codec from a file's extension, falling back to the default.

        Raises:
            ValidationError: If the extension is unknown and there is no default.
        """
        suffix = Path(path).suffix
        if suffix and suffix.lower() in self._by_extension:
            return self._by_extension[suffix.lower()]
        if self._default is not None:
            logger.debug(
                "codec_fallback_to_default",
                component="codecs",
                path=str(path),
                codec=self._default,
            )
            return self._by_name[self._default]
        return self.by_extension(suffix or "<none>")


def default_registry(settings: LibrarySettings | None = None) -> CodecRegistry:
    """Build the registry of built-in codecs.

    Args:
        settings: Library settings; read from the environment when omitted.

    Returns:
        Registry holding the YAML, JSON and HOCON codecs.
    """
    settings = settings or get_settings()
    return CodecRegistry(
        [
            YamlCodec(indent=settings.yaml_indent),
            JsonCodec(indent=settings.json_indent),
            HoconCodec(indent=settings.hocon_indent),
        ],
        default=settings.default_codec,
    )
