"""In-memory notebook document.

``Notebook`` wraps the parsed JSON object itself rather than copying it into
typed fields, so metadata, format versions and any keys this package does not
know about are written back exactly as they were read.
"""

from __future__ import annotations

from typing import Any

from ..models import CellType
from .source import decode_source

CODE_ONLY_FIELDS = ("execution_count", "outputs")


class Notebook:
    """A notebook document loaded from ``path``."""

    def __init__(self, data: dict[str, Any], path: str | None = None):
        self.data = data
        self.path = path

    @property
    def cells(self) -> list[dict[str, Any]]:
        return self.data["cells"]

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def format_version(self) -> tuple[int, int]:
        return (int(self.data.get("nbformat", 4)), int(self.data.get("nbformat_minor", 0)))

    @property
    def supports_cell_ids(self) -> bool:
        """Cell ids are part of the format from nbformat 4.5 on."""
        return self.format_version >= (4, 5)

    @property
    def kernel_name(self) -> str | None:
        kernelspec = self.data.get("metadata", {}).get("kernelspec")
        return kernelspec.get("name") if isinstance(kernelspec, dict) else None


def cell_source(cell: dict[str, Any]) -> str:
    return decode_source(cell.get("source"))


def cell_type(cell: dict[str, Any]) -> str:
    return cell.get("cell_type", "")


def new_cell(kind: CellType, source: list[str], cell_id: str | None = None) -> dict[str, Any]:
    """Build a cell dict with the canonical key order."""
    cell: dict[str, Any] = {"cell_type": kind.value}
    if kind is CellType.CODE:
        cell["execution_count"] = None
    if cell_id is not None:
        cell["id"] = cell_id
    cell["metadata"] = {}
    if kind is CellType.CODE:
        cell["outputs"] = []
    cell["source"] = source
    return cell
