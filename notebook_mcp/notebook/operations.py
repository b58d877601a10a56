"""Structural edits applied to an in-memory notebook.

Each function mutates the notebook in place and raises a ``NotebookMCPError``
subclass before touching anything when its arguments are invalid. None of them
read or write files.
"""

from __future__ import annotations

from typing import Any

from ..exceptions import CellIndexError
from ..exceptions import InvalidCellTypeError
from ..exceptions import LastCellError
from ..models import CellType
from .document import CODE_ONLY_FIELDS
from .document import Notebook
from .document import new_cell
from .locator import CellRef
from .locator import check_index
from .locator import resolve_cell
from .source import encode_source


def validate_cell_type(value: Any) -> CellType:
    if isinstance(value, CellType):
        return value
    try:
        return CellType(value)
    except ValueError:
        raise InvalidCellTypeError(value, CellType.values()) from None


def insert_cell(
    notebook: Notebook,
    position: int,
    cell_type: str | CellType,
    source: str,
    cell_id: str | None = None,
) -> dict[str, Any]:
    """Insert a new cell so that it ends up at ``position`` (``0 <= position <= len``)."""
    kind = validate_cell_type(cell_type)
    length = len(notebook)
    if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position <= length:
        raise CellIndexError(position, length, upper=length, label="position")

    cell = new_cell(kind, encode_source(source), cell_id=cell_id)
    notebook.cells.insert(position, cell)
    return cell


def delete_cell(notebook: Notebook, index: CellRef) -> dict[str, Any]:
    """Remove and return the referenced cell; the last cell cannot be removed."""
    position = resolve_cell(notebook, index)
    if len(notebook) == 1:
        raise LastCellError()
    return notebook.cells.pop(position)


def move_cell(notebook: Notebook, from_index: int, to_index: int) -> None:
    """Move a cell so that it ends up at ``to_index``."""
    check_index(notebook, from_index)
    check_index(notebook, to_index, label="target index")
    if from_index == to_index:
        return
    cell = notebook.cells.pop(from_index)
    notebook.cells.insert(to_index, cell)


def edit_cell_source(notebook: Notebook, ref: CellRef, new_source: str) -> int:
    """Replace a cell's source; type, outputs and execution count are untouched."""
    position = resolve_cell(notebook, ref)
    notebook.cells[position]["source"] = encode_source(new_source)
    return position


def convert_cell_type(notebook: Notebook, ref: CellRef, new_type: str | CellType) -> bool:
    """Change a cell's type. Returns False when the cell already has that type."""
    position = resolve_cell(notebook, ref)
    kind = validate_cell_type(new_type)
    cell = notebook.cells[position]
    if cell.get("cell_type") == kind.value:
        return False

    cell["cell_type"] = kind.value
    if kind is CellType.CODE:
        cell["execution_count"] = None
        cell["outputs"] = []
        # code cells have no attachments in the notebook format
        cell.pop("attachments", None)
    else:
        for field in CODE_ONLY_FIELDS:
            cell.pop(field, None)
    return True
