"""Versioned schema transformations for configuration trees."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from confnode.errors import TypeMismatchError, ValidationError
from confnode.node import ABSENT, ConfigTree, Node, NodeKind, PathLike, as_path


logger = structlog.get_logger()

# Version reported for trees that carry no version key
VERSION_UNKNOWN = -1

TreeAction = Callable[[ConfigTree], None]


@dataclass(frozen=True)
class Migration:
    """A schema migration step.

    Attributes:
        version: Schema version after applying this migration.
        description: Human-readable description.
        apply: Mutates the tree in place.
    """

    version: int
    description: str
    apply: TreeAction


@dataclass(frozen=True)
class TransformationResult:
    """Outcome of ``Transformation.update``.

    Attributes:
        start_version: Version found before updating.
        end_version: Version after updating.
        applied: Versions of the migrations that ran, in order.
    """

    start_version: int
    end_version: int
    applied: tuple[int, ...] = ()

    @property
    def changed(self) -> bool:
        return self.start_version != self.end_version


class Transformation:
    """Upgrades trees through an ordered list of migrations.

    The current schema version is stored in the tree under ``version_key``.
    """

    def __init__(
        self,
        migrations: Iterable[Migration],
        version_key: PathLike = "config-version",
    ) -> None:
        """Initialize the transformation.

        Args:
            migrations: Migration steps; versions must be unique and >= 0.
            version_key: Path of the version number in the tree.

        Raises:
            ValidationError: If versions are duplicated or negative.
        """
        ordered = sorted(migrations, key=lambda m: m.version)
        versions = [m.version for m in ordered]
        if len(set(versions)) != len(versions):
            raise ValidationError(f"duplicate migration versions: {versions}")
        if versions and versions[0] < 0:
            raise ValidationError(f"migration versions must be >= 0: {versions}")
        self._migrations = ordered
        self._version_key = as_path(version_key)
        self._log = logger.bind(component="transformation")

    @property
    def latest_version(self) -> int:
        """Version reached after all migrations, or ``VERSION_UNKNOWN``."""
        if not self._migrations:
            return VERSION_UNKNOWN
        return self._migrations[-1].version

    def version(self, tree: ConfigTree) -> int:
        """Read the schema version of ``tree``.

        Returns:
            The stored version, or ``VERSION_UNKNOWN`` if absent.

        Raises:
            TypeMismatchError: If the stored version is not an integer.
        """
        node = tree.get(self._version_key)
        if node is ABSENT or node.is_null:
            return VERSION_UNKNOWN
        if node.kind is NodeKind.NUMBER and isinstance(node.value, int):
            return node.value
        raise TypeMismatchError(
            "config version must be an integer",
            path=self._version_key,
            expected="int",
            actual=node.kind.value,
        )

    def pending(self, tree: ConfigTree) -> list[Migration]:
        """Migrations that ``update`` would apply to ``tree``."""
        current = self.version(tree)
        return [m for m in self._migrations if m.version > current]

    def update(self, tree: ConfigTree) -> TransformationResult:
        """Apply pending migrations to ``tree`` in place.

        An empty tree has no schema yet and is left untouched. The version
        key is stamped after every migration, so a failing step leaves the
        tree at the last successful version.

        Args:
            tree: Tree to upgrade.

        Returns:
            Start and end versions, and the migrations applied.
        """
        start = self.version(tree)
        if tree.is_empty():
            return TransformationResult(start_version=start, end_version=start)

        applied: list[int] = []
        for migration in self.pending(tree):
            migration.apply(tree)
            tree.set(self._version_key, Node.number(migration.version))
            applied.append(migration.version)
            self._log.debug(
                "config_migration_applied",
                version=migration.version,
                description=migration.description,
            )

        end = self.version(tree)
        if start != end:
            self._log.info("config_schema_updated", from_version=start, to_version=end)
        return TransformationResult(
            start_version=start, end_version=end, applied=tuple(applied)
        )


def move(source: PathLike, destination: PathLike) -> TreeAction:
    """Action moving the node at ``source`` to ``destination`` if present."""
    source_path = as_path(source)
    destination_path = as_path(destination)

    def _apply(tree: ConfigTree) -> None:
        node = tree.get(source_path)
        if not isinstance(node, Node):
            return
        moved = node.copy()
        tree.remove(source_path)
        tree.set(destination_path, moved)

    return _apply


def set_default(path: PathLike, value: Any) -> TreeAction:
    """Action setting ``path`` to ``value`` only when it is absent."""
    target = as_path(path)

    def _apply(tree: ConfigTree) -> None:
        if not tree.has_path(target):
            tree.set(target, value)

    return _apply


def remove(path: PathLike) -> TreeAction:
    """Action removing the node at ``path``."""
    target = as_path(path)

    def _apply(tree: ConfigTree) -> None:
        tree.remove(target)

    return _apply


def chain(*actions: TreeAction) -> TreeAction:
    """Action running ``actions`` in order."""

    def _apply(tree: ConfigTree) -> None:
        for action in actions:
            action(tree)

    return _apply
