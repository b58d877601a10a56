"""Storage layer for notebook files.

Usage:
    from notebook_mcp.storage import get_storage

    storage = get_storage()
    text = storage.read_file("/work/analysis.ipynb")
    storage.write_file("/work/analysis.ipynb", text)
"""

from .base import FileInfo
from .base import StorageBackend
from .local import LocalStorageBackend
from .local import get_storage
from .local import reset_storage

__all__ = ["FileInfo", "StorageBackend", "LocalStorageBackend", "get_storage", "reset_storage"]
