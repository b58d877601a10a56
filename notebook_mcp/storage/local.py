"""Local Filesystem Storage Backend.

Implements the StorageBackend interface using the local filesystem. Writes go
to a temporary sibling file that replaces the target only once it is fully
flushed to disk.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from datetime import timezone
from pathlib import Path

from .base import FileInfo
from .base import StorageBackend


class LocalStorageBackend(StorageBackend):
    """Storage backend using the local filesystem.

    Args:
        root_dir: Base directory for relative paths. Absolute paths are used as-is.
                  Defaults to the current working directory.
    """

    def __init__(self, root_dir: str | None = None):
        self._root = Path(root_dir).resolve() if root_dir else None

    @property
    def backend_type(self) -> str:
        return "local"

    def _full_path(self, path: str) -> Path:
        """Convert a possibly relative path to an absolute one."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute() or self._root is None:
            return candidate.resolve()
        return (self._root / candidate).resolve()

    def read_file(self, path: str) -> str:
        full_path = self._full_path(path)
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return full_path.read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        full_path = self._full_path(path)
        payload = content.encode("utf-8")
        fd, tmp_name = tempfile.mkstemp(dir=full_path.parent, prefix=f".{full_path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            if full_path.exists():
                os.chmod(tmp_name, full_path.stat().st_mode & 0o777)
            os.replace(tmp_name, full_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def file_exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def get_file_info(self, path: str) -> FileInfo | None:
        full_path = self._full_path(path)
        if not full_path.is_file():
            return None

        stat = full_path.stat()
        return FileInfo(
            path=str(full_path),
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def touch(self, path: str) -> datetime:
        full_path = self._full_path(path)
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        os.utime(full_path, None)
        return datetime.fromtimestamp(full_path.stat().st_mtime, tz=timezone.utc)


_storage: StorageBackend | None = None


def get_storage() -> StorageBackend:
    """Get the process-wide storage backend (singleton pattern)."""
    global _storage
    if _storage is None:
        _storage = LocalStorageBackend()
    return _storage


def reset_storage():
    """Reset the storage singleton (primarily for testing)."""
    global _storage
    _storage = None
