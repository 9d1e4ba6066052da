"""Unit tests for the codec registry."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from confnode.codecs import (
    Codec,
    CodecDescriptor,
    CodecRegistry,
    HoconCodec,
    JsonCodec,
    YamlCodec,
    default_registry,
)
from confnode.errors import ValidationError
from confnode.node import ConfigTree
from confnode.settings import LibrarySettings


class IniLikeCodec:
    """Minimal third-party codec used to exercise the protocol."""

    @property
    def descriptor(self) -> CodecDescriptor:
        return CodecDescriptor(
            name="ini", extensions=(".ini",), content_type="text/plain"
        )

    def parse(self, data: bytes) -> ConfigTree:
        tree = ConfigTree()
        for line in data.decode().splitlines():
            key, _, value = line.partition("=")
            tree.set((key.strip(),), value.strip())
        return tree

    def serialize(self, tree: ConfigTree) -> bytes:
        lines = [f"{k} = {v}" for k, v in tree.to_python().items()]
        return "\n".join(lines).encode()


class TestCodecRegistry:
    """Tests for CodecRegistry lookups."""

    @pytest.fixture
    def registry(self) -> CodecRegistry:
        """Create a registry holding the built-in codecs."""
        return CodecRegistry([YamlCodec(), JsonCodec(), HoconCodec()])

    @pytest.mark.unit
    def test_by_name(self, registry: CodecRegistry) -> None:
        """Codecs are found by name, case-insensitively."""
        assert isinstance(registry.by_name("json"), JsonCodec)
        assert isinstance(registry.by_name("YAML"), YamlCodec)

    @pytest.mark.unit
    def test_unknown_name(self, registry: CodecRegistry) -> None:
        """Unknown names raise ValidationError."""
        with pytest.raises(ValidationError, match="unknown codec"):
            registry.by_name("toml")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("extension", "expected"),
        [
            (".yml", YamlCodec),
            ("yaml", YamlCodec),
            (".JSON", JsonCodec),
            (".conf", HoconCodec),
            ("hocon", HoconCodec),
        ],
    )
    def test_by_extension(
        self, registry: CodecRegistry, extension: str, expected: type
    ) -> None:
        """Extensions match with or without the dot."""
        assert isinstance(registry.by_extension(extension), expected)

    @pytest.mark.unit
    def test_for_path(self, registry: CodecRegistry) -> None:
        """Paths select a codec from their suffix."""
        assert isinstance(registry.for_path(Path("/etc/app/server.yml")), YamlCodec)
        assert isinstance(registry.for_path("settings.conf"), HoconCodec)

    @pytest.mark.unit
    def test_for_path_unknown_without_default(self, registry: CodecRegistry) -> None:
        """Unknown suffixes fail when no default is configured."""
        with pytest.raises(ValidationError):
            registry.for_path("settings.toml")
        with pytest.raises(ValidationError):
            registry.for_path("settings")

    @pytest.mark.unit
    def test_for_path_falls_back_to_default(self) -> None:
        """Unknown suffixes use the default codec when configured."""
        registry = CodecRegistry([YamlCodec(), JsonCodec()], default="json")

        assert isinstance(registry.for_path("settings.txt"), JsonCodec)

    @pytest.mark.unit
    def test_names(self, registry: CodecRegistry) -> None:
        """Names are listed in registration order."""
        assert registry.names == ["yaml", "json", "hocon"]

    @pytest.mark.unit
    def test_duplicate_name_rejected(self) -> None:
        """Two codecs may not share a name."""
        with pytest.raises(ValidationError, match="duplicate codec name"):
            CodecRegistry([JsonCodec(), JsonCodec()])

    @pytest.mark.unit
    def test_unregistered_default_rejected(self) -> None:
        """The default must name a registered codec."""
        with pytest.raises(ValidationError):
            CodecRegistry([JsonCodec()], default="yaml")

    @pytest.mark.unit
    def test_custom_codec(self) -> None:
        """Any object satisfying the protocol can be registered."""
        codec = IniLikeCodec()
        registry = CodecRegistry([codec, JsonCodec()])

        assert isinstance(codec, Codec)
        assert registry.for_path("app.ini") is codec
        assert registry.by_name("ini").parse(b"a = 1").get_value("a") == "1"


class TestDefaultRegistry:
    """Tests for the settings-driven default registry."""

    @pytest.mark.unit
    def test_holds_builtin_codecs(self) -> None:
        """The default registry knows YAML, JSON and HOCON."""
        registry = default_registry(LibrarySettings())

        assert registry.names == ["yaml", "json", "hocon"]
        assert isinstance(registry.for_path("unknown.txt"), YamlCodec)

    @pytest.mark.unit
    def test_settings_drive_codecs(self) -> None:
        """Indentation and the default codec come from settings."""
        settings = LibrarySettings(json_indent=0, default_codec="json")
        registry = default_registry(settings)
        output = registry.by_name("json").serialize(ConfigTree.from_python({"a": 1}))

        assert output == b'{"a": 1}\n'
        assert isinstance(registry.for_path("unknown.txt"), JsonCodec)

    @pytest.mark.unit
    def test_settings_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONFNODE_ environment variables configure the registry."""
        monkeypatch.setenv("CONFNODE_DEFAULT_CODEC", "hocon")

        registry = default_registry()

        assert isinstance(registry.for_path("unknown.txt"), HoconCodec)


class TestCodecDescriptor:
    """Tests for descriptor validation."""

    @pytest.mark.unit
    def test_descriptor_is_frozen(self) -> None:
        """Descriptors are immutable."""
        descriptor = JsonCodec().descriptor

        with pytest.raises(PydanticValidationError):
            descriptor.name = "other"  # type: ignore[misc]

    @pytest.mark.unit
    def test_descriptor_requires_extension(self) -> None:
        """At least one extension is required."""
        with pytest.raises(PydanticValidationError):
            CodecDescriptor(name="x", extensions=(), content_type="text/plain")
