"""Load and save notebook files.

``save_notebook`` renders the complete JSON text before the storage backend
is asked to write anything, and the backend replaces the file atomically, so a
failed save never leaves a half-written notebook behind.
"""

from __future__ import annotations

import json
import logging

from ..config import get_settings
from ..exceptions import NotebookFormatError
from ..exceptions import NotebookIOError
from ..storage import StorageBackend
from ..storage import get_storage
from .document import Notebook
from .source import decode_source

logger = logging.getLogger(__name__)


def parse_notebook(text: str, path: str = "<string>") -> Notebook:
    """Parse notebook JSON text, validating only the structure the engine relies on."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise NotebookFormatError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, dict):
        raise NotebookFormatError(path, "top-level value must be an object")
    for key in ("nbformat", "nbformat_minor"):
        if key in data and (isinstance(data[key], bool) or not isinstance(data[key], int)):
            raise NotebookFormatError(path, f"'{key}' must be an integer")
    if "metadata" in data and not isinstance(data["metadata"], dict):
        raise NotebookFormatError(path, "'metadata' must be an object")
    cells = data.get("cells")
    if not isinstance(cells, list):
        raise NotebookFormatError(path, "missing 'cells' list")
    for index, cell in enumerate(cells):
        if not isinstance(cell, dict):
            raise NotebookFormatError(path, f"cell {index} is not an object")
        try:
            decode_source(cell.get("source"))
        except TypeError as e:
            raise NotebookFormatError(path, f"cell {index}: {e}") from e

    return Notebook(data, path=path)


def serialize_notebook(notebook: Notebook, indent: int | None = None) -> str:
    """Render the notebook as JSON text with a trailing newline."""
    if indent is None:
        indent = get_settings().json_indent
    return json.dumps(notebook.data, indent=indent, ensure_ascii=False) + "\n"


def load_notebook(path: str, storage: StorageBackend | None = None) -> Notebook:
    """Read and parse the notebook at ``path``."""
    storage = storage or get_storage()
    try:
        text = storage.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise NotebookIOError(path, "read", str(e)) from e
    notebook = parse_notebook(text, path)
    logger.debug("Loaded %s with %d cells", path, len(notebook))
    return notebook


def save_notebook(path: str, notebook: Notebook, storage: StorageBackend | None = None) -> None:
    """Serialize ``notebook`` and replace the file at ``path`` with it."""
    storage = storage or get_storage()
    payload = serialize_notebook(notebook)
    try:
        storage.write_file(path, payload)
    except OSError as e:
        raise NotebookIOError(path, "write", str(e)) from e
    logger.debug("Saved %s with %d cells", path, len(notebook))
