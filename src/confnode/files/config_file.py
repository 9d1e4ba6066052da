"""Managed configuration file with defaults and schema upgrades."""

from pathlib import Path
from typing import Any, Protocol, TypeVar, cast, runtime_checkable

import structlog

from confnode.binding import Binding
from confnode.codecs import Codec, CodecRegistry, default_registry
from confnode.errors import ConfigError, ConfigIOError
from confnode.files.state_machine import ConfigState, ConfigStateMachine
from confnode.io import AtomicWriter, load, save
from confnode.merge import merge
from confnode.node import ConfigTree
from confnode.transform import Transformation


logger = structlog.get_logger()

T = TypeVar("T")


@runtime_checkable
class DefaultSource(Protocol):
    """Anything that can provide the bundled default file's bytes.

    ``pathlib.Path`` and ``importlib.resources`` traversables both qualify.
    """

    def read_bytes(self) -> bytes: ...


class ConfigFile:
    """A configuration file on disk, layered over defaults.

    Loading follows a state machine:
    UNLOADED -> LOADING -> READY (or FAILED), and READY/FAILED -> LOADING
    on reload.

    On load the bundled default file is copied into place if the file does
    not exist yet, the schema transformation is applied (saving the file
    back when the version changed), and the result is merged over the
    defaults to give the effective tree.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        codec: Codec | str | None = None,
        registry: CodecRegistry | None = None,
        defaults: ConfigTree | None = None,
        default_source: DefaultSource | bytes | None = None,
        transformation: Transformation | None = None,
        copy_defaults: bool = False,
    ) -> None:
        """Initialize the config file.

        Args:
            path: Location of the file.
            codec: Codec instance or name; inferred from the extension when
                omitted.
            registry: Registry for name/extension lookup.
            defaults: Tree of default values. Takes precedence over the
                parsed ``default_source`` as the defaults layer.
            default_source: Bundled default file content, copied into place
                when ``path`` does not exist.
            transformation: Schema upgrades applied to the loaded file.
            copy_defaults: Write default values missing from the file back
                into it after loading.
        """
        self._path = Path(path)
        if codec is None or isinstance(codec, str):
            registry = registry or default_registry()
            if codec:
                codec = registry.by_name(codec)
            else:
                codec = registry.for_path(self._path)
        self._codec: Codec = codec
        self._defaults = defaults
        self._default_source = default_source
        self._transformation = transformation
        self._copy_defaults = copy_defaults
        self._state_machine = ConfigStateMachine()
        self._raw: ConfigTree | None = None
        self._tree: ConfigTree | None = None
        self._log = logger.bind(
            component="config_file",
            path=str(self._path),
            codec=self._codec.descriptor.name,
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def state(self) -> ConfigState:
        """Get the current loading state."""
        return self._state_machine.state

    @property
    def copy_defaults(self) -> bool:
        return self._copy_defaults

    @copy_defaults.setter
    def copy_defaults(self, value: bool) -> None:
        self._copy_defaults = value

    @property
    def tree(self) -> ConfigTree:
        """Effective tree: file contents merged over defaults.

        Raises:
            ConfigStateError: If the file is not loaded.
        """
        self._state_machine.require(ConfigState.READY)
        return cast(ConfigTree, self._tree)

    @property
    def raw(self) -> ConfigTree:
        """File contents as loaded, without defaults.

        Raises:
            ConfigStateError: If the file is not loaded.
        """
        self._state_machine.require(ConfigState.READY)
        return cast(ConfigTree, self._raw)

    def save_default_config(self) -> bool:
        """Copy the bundled default file into place if the file is missing.

        Returns:
            True if the default file was written.

        Raises:
            ConfigIOError: If the file or its folder cannot be written.
        """
        if self._path.exists() or self._default_source is None:
            return False
        AtomicWriter(create_parents=True).write(
            self._path, _default_bytes(self._default_source)
        )
        self._log.info("default_config_saved")
        return True

    def load(self) -> ConfigTree:
        """Load (or reload) the file.

        Returns:
            The effective tree.

        Raises:
            ConfigStateError: If called while already loading.
            ConfigIOError: If the file cannot be read or written.
            ParseError: If the file or default source is malformed.
            SerializationError: If an upgraded tree cannot be saved.
            TypeMismatchError: If defaults and file have incompatible roots.
        """
        self._state_machine.transition(ConfigState.LOADING)
        self._log.debug("loading_config_file", phase="LOADING")

        try:
            self.save_default_config()
            raw = ConfigTree()
            if self._path.exists():
                raw = load(self._path, self._codec)

            if self._transformation is not None:
                result = self._transformation.update(raw)
                if result.changed:
                    save(raw, self._path, self._codec)

            defaults = self._defaults_tree()
            effective = raw.copy() if defaults is None else merge(defaults, raw)

            if self._copy_defaults and effective != raw:
                save(effective, self._path, self._codec)
                raw = effective.copy()
                self._log.info("config_defaults_copied")
        except Exception as e:
            self._state_machine.transition(ConfigState.FAILED)
            self._log.error(
                "config_file_load_failed",
                phase="FAILED",
                error=e.to_dict() if isinstance(e, ConfigError) else str(e),
            )
            raise

        self._raw = raw
        self._tree = effective
        self._state_machine.transition(ConfigState.READY)
        self._log.info("config_file_loaded", phase="READY")
        return effective

    def reload(self) -> ConfigTree:
        """Re-read the file from disk, discarding unsaved changes."""
        return self.load()

    def save(self) -> None:
        """Write the file contents (without unset defaults) to disk.

        Raises:
            ConfigStateError: If the file is not loaded.
            ConfigIOError: If the file cannot be written.
            SerializationError: If a value cannot be represented.
        """
        save(self.raw, self._path, self._codec)
        self._log.debug("config_file_saved")

    def get(self, binding: Binding[T]) -> T:
        """Read a bound value from the effective tree."""
        return binding.read(self.tree)

    def set(self, binding: Binding[Any], value: Any) -> None:
        """Write a bound value into the file contents and the effective tree."""
        binding.write(self.raw, value)
        binding.write(self.tree, value)

    def _defaults_tree(self) -> ConfigTree | None:
        if self._defaults is not None:
            return self._defaults
        if self._default_source is not None:
            return self._codec.parse(_default_bytes(self._default_source))
        return None


def _default_bytes(source: DefaultSource | bytes | None) -> bytes:
    if source is None:
        return b""
    if isinstance(source, bytes):
        return source
    try:
        return source.read_bytes()
    except OSError as e:
        raise ConfigIOError(
            f"cannot read default config: {e.strerror or e}",
            location=str(source),
        ) from e
