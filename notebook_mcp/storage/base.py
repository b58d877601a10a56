"""Abstract Base Class for Storage Backends.

Defines the interface the notebook store uses to reach the file system.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass
class FileInfo:
    """Metadata about a stored file."""

    path: str
    size: int
    last_modified: datetime
    content_type: str = "application/x-ipynb+json"


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Return the backend type identifier (e.g., 'local')."""
        pass

    @abstractmethod
    def read_file(self, path: str) -> str:
        """Read file content as UTF-8 text.

        Raises:
            FileNotFoundError: If file does not exist
            OSError: If the file cannot be read
        """
        pass

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Replace the file with ``content``.

        Implementations must leave the previous file intact if the write fails.
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if a file exists."""
        pass

    @abstractmethod
    def get_file_info(self, path: str) -> FileInfo | None:
        """Get metadata about a file, or None if it does not exist."""
        pass

    @abstractmethod
    def touch(self, path: str) -> datetime:
        """Set the file's modification time to now and return it.

        Raises:
            FileNotFoundError: If file does not exist
        """
        pass
