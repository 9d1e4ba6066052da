"""Atomic file writing.

Prevents partial writes from leaving a truncated configuration behind.
"""

import contextlib
import hashlib
import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from confnode.errors import ConfigIOError


logger = structlog.get_logger()


@dataclass(frozen=True)
class WrittenFile:
    """Result of an atomic write.

    Attributes:
        path: Final file path.
        bytes_written: Size of the written content.
        sha256: SHA-256 checksum of the content.
    """

    path: str
    bytes_written: int
    sha256: str


class AtomicWriter:
    """Provides atomic file writing operations.

    Writes content to a temporary sibling file first, then renames it over
    the final path. Readers see either the complete old file or the
    complete new file, never a partial write.
    """

    def __init__(self, create_parents: bool = True) -> None:
        """Initialize the atomic writer.

        Args:
            create_parents: Create missing parent directories before writing.
        """
        self._create_parents = create_parents
        self._log = logger.bind(component="atomic_writer")

    def write(self, path: Path, content: bytes) -> WrittenFile:
        """Write content to file with atomic semantics.

        Args:
            path: Target file path.
            content: Raw bytes to write.

        Returns:
            WrittenFile with path, checksum, and size information.

        Raises:
            ConfigIOError: If the file or its directory cannot be written. The
                temporary file is removed and the target left untouched.
        """
        temp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
        try:
            if self._create_parents:
                path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise ConfigIOError(
                f"cannot write {path}: {e.strerror or e}", location=str(path)
            ) from e

        sha256 = hashlib.sha256(content).hexdigest()
        self._log.debug(
            "file_written",
            path=str(path),
            bytes=len(content),
            sha256=sha256[:12],
        )
        return WrittenFile(path=str(path), bytes_written=len(content), sha256=sha256)
