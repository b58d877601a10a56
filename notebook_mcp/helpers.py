"""Shared helper functions for the Notebook MCP tool modules."""

import uuid

from .config import get_settings
from .notebook import Notebook


def _preview(source: str, limit: int | None = None) -> str:
    """Single-line preview of a cell's source, truncated to ``limit`` characters."""
    if limit is None:
        limit = get_settings().preview_length
    preview = source[:limit] + "..." if len(source) > limit else source
    return preview.replace("\r\n", " ").replace("\n", " ")


def _new_cell_id(notebook: Notebook) -> str | None:
    """A fresh cell id, or None when the notebook format has no cell ids."""
    if not (get_settings().assign_cell_ids and notebook.supports_cell_ids):
        return None
    taken = {cell.get("id") for cell in notebook.cells}
    while True:
        cell_id = uuid.uuid4().hex[:8]
        if cell_id not in taken:
            return cell_id
