# src/nginx_controller/files.py

"""File system access for configuration and certificate files.

Filesystem performs real I/O. DryRunFilesystem records what would have been
written and echoes it, without touching the disk. The controller picks one
at construction so call sites never branch on the mode.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TextIO

from .errors import PersistenceError


class Filesystem:
    """Real file system with all-or-nothing writes."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or logging.getLogger(__name__)

    def write(self, path: Path, content: str, mode: int = 0o644) -> None:
        """Replace path with content atomically.

        Content goes to a temp file in the same directory, which is then
        renamed over path. On failure the previous file is left intact.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        self.log.debug("Writing %s", path)
        try:
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        except OSError as e:
            raise PersistenceError(f"Failed to open {path}: {e}", path) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, mode)
            os.replace(temp_path, path)
        except (OSError, ValueError) as e:
            # UnicodeEncodeError is a ValueError
            Path(temp_path).unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {e}", path) from e

    def remove(self, path: Path) -> bool:
        """Delete path. Returns False if it did not exist.

        Raises:
            PersistenceError: If the file exists but cannot be deleted.
        """
        self.log.debug("Deleting %s", path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}", path) from e
        return True

    def makedirs(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Couldn't create directory {path}: {e}", path) from e

    def exists(self, path: Path) -> bool:
        return path.exists()


class DryRunFilesystem:
    """Records writes and removals and echoes content instead of writing.

    Args:
        stream: Where would-be content is echoed. Defaults to stdout.
        logger: Diagnostic logger.
    """

    def __init__(
        self, stream: TextIO | None = None, logger: logging.Logger | None = None
    ):
        self.stream = stream
        self.log = logger or logging.getLogger(__name__)
        self.writes: list[tuple[Path, str]] = []
        self.removals: list[Path] = []

    def write(self, path: Path, content: str, mode: int = 0o644) -> None:
        self.log.info("Would write %s", path)
        self.writes.append((path, content))
        print(f"# {path}", file=self.stream)
        # Owner-only files hold private keys
        if mode & 0o077:
            print(content, file=self.stream)

    def remove(self, path: Path) -> bool:
        self.log.info("Would delete %s", path)
        self.removals.append(path)
        return True

    def makedirs(self, path: Path) -> None:
        self.log.debug("Would create directory %s", path)

    def exists(self, path: Path) -> bool:
        # Nothing is persisted in dry-run mode; assume referenced files exist
        return True
