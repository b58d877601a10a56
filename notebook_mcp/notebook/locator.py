"""Resolve cell references to positions in the current cell list."""

from __future__ import annotations

from collections import Counter

from ..exceptions import CellIndexError
from ..exceptions import CellNotFoundError
from .document import Notebook

CellRef = int | str


def check_index(notebook: Notebook, index, label: str = "cell index") -> int:
    """Validate a position against ``[0, len - 1]``."""
    length = len(notebook)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < length:
        raise CellIndexError(index, length, label=label)
    return index


def resolve_cell(notebook: Notebook, ref: CellRef) -> int:
    """Return the position ``ref`` points at.

    Integers are positions. Strings are cell ids and are never read as
    positions; the first cell carrying the id wins.
    """
    if isinstance(ref, str):
        for index, cell in enumerate(notebook.cells):
            if cell.get("id") == ref:
                return index
        raise CellNotFoundError(ref)
    return check_index(notebook, ref)


def find_duplicate_ids(notebook: Notebook) -> list[str]:
    """Ids carried by more than one cell, in first-seen order."""
    counts = Counter(cell["id"] for cell in notebook.cells if isinstance(cell.get("id"), str))
    return [cell_id for cell_id, count in counts.items() if count > 1]
