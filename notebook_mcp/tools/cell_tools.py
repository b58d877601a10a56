"""Cell Management Tools.

This module provides the tools that read and restructure the cells of a
notebook file:
- list_cells / get_cell_source: read cells by index
- edit_cell_source / edit_cell: replace a cell's source (by index, or by id or index)
- insert_cell / add_cell: create a cell at a position (add_cell defaults to the end)
- delete_cell: remove a cell (the last remaining cell is protected)
- move_cell: reorder a cell
- convert_cell_type: switch between code, markdown and raw

Every tool loads the notebook, applies one change and writes it back.
"""

from mcp.server import FastMCP

from ..error_handler import handle_mcp_tool_error
from ..exceptions import NotebookMCPError
from ..helpers import _new_cell_id
from ..helpers import _preview
from ..logger_config import log_mcp_call
from ..models import CellSummary
from ..models import OperationStatus
from ..notebook import cell_source
from ..notebook import cell_type as get_cell_type
from ..notebook import convert_cell_type as convert_type
from ..notebook import delete_cell as remove_cell
from ..notebook import edit_cell_source as replace_source
from ..notebook import find_duplicate_ids
from ..notebook import insert_cell as add_new_cell
from ..notebook import load_notebook
from ..notebook import move_cell as relocate_cell
from ..notebook import resolve_cell
from ..notebook import save_notebook


def register_cell_tools(mcp_server: FastMCP) -> None:
    """Register cell management tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    def list_cells(notebook_path: str) -> OperationStatus:
        """List all cells in a Jupyter notebook with their indices and types.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file

        Returns:
            OperationStatus: message lists one "[index] type: preview" line per cell;
            details["cells"] holds the same rows as structured data
        """
        try:
            notebook = load_notebook(notebook_path)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("list_cells", e, {"notebook_path": notebook_path})

        rows = [
            CellSummary(
                index=index,
                cell_type=get_cell_type(cell),
                preview=_preview(cell_source(cell)),
                cell_id=cell.get("id"),
            )
            for index, cell in enumerate(notebook.cells)
        ]
        listing = "\n".join(f"[{row.index}] {row.cell_type}: {row.preview}" for row in rows)
        return OperationStatus(
            success=True,
            message=f"Notebook: {notebook_path}\nTotal cells: {len(rows)}\n\n{listing}",
            details={"total_cells": len(rows), "cells": [row.model_dump() for row in rows]},
        )

    @mcp_server.tool()
    @log_mcp_call
    def get_cell_source(notebook_path: str, cell_index: int) -> OperationStatus:
        """Get the source code of a specific cell by index.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_index (int): Zero-based index of the cell

        Returns:
            OperationStatus: message is the cell's complete source
        """
        try:
            notebook = load_notebook(notebook_path)
            index = resolve_cell(notebook, cell_index)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("get_cell_source", e, {"notebook_path": notebook_path})

        cell = notebook.cells[index]
        return OperationStatus(
            success=True,
            message=cell_source(cell),
            details={"cell_index": index, "cell_type": get_cell_type(cell)},
        )

    @mcp_server.tool()
    @log_mcp_call
    def edit_cell_source(notebook_path: str, cell_index: int, new_source: str) -> OperationStatus:
        """Replace the source code of a specific cell by index.

        Outputs, execution count and cell type are left as they are.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_index (int): Zero-based index of the cell
            new_source (str): New source for the cell

        Returns:
            OperationStatus: Result with success status
        """
        try:
            notebook = load_notebook(notebook_path)
            replace_source(notebook, cell_index, new_source)
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("edit_cell_source", e, {"notebook_path": notebook_path})

        return OperationStatus(
            success=True,
            message=f"Successfully updated cell {cell_index}",
            details={"cell_index": cell_index},
        )

    @mcp_server.tool()
    @log_mcp_call
    def insert_cell(
        notebook_path: str,
        position: int,
        cell_type: str = "code",
        source: str = "",
    ) -> OperationStatus:
        """Insert a new cell at a specific position.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            position (int): Index the new cell will occupy (0 to number of cells)
            cell_type (str): "code", "markdown" or "raw"
            source (str): Initial content of the cell

        Returns:
            OperationStatus: Result with the new cell's index (and id, when assigned)
        """
        try:
            notebook = load_notebook(notebook_path)
            cell = add_new_cell(notebook, position, cell_type, source, cell_id=_new_cell_id(notebook))
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("insert_cell", e, {"notebook_path": notebook_path})

        return OperationStatus(
            success=True,
            message=f"Successfully inserted {cell_type} cell at position {position}",
            details={"cell_index": position, "cell_type": cell_type, "cell_id": cell.get("id")},
        )

    @mcp_server.tool()
    @log_mcp_call
    def add_cell(
        notebook_path: str,
        source: str = "",
        cell_type: str = "code",
        position: int | None = None,
    ) -> OperationStatus:
        """Add a new cell to the notebook, at the end unless a position is given.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            source (str): Initial content of the cell
            cell_type (str): "code", "markdown" or "raw"
            position (int | None): Index for the new cell; omit to append

        Returns:
            OperationStatus: Result with the new cell's index (and id, when assigned)
        """
        try:
            notebook = load_notebook(notebook_path)
            if position is None:
                position = len(notebook)
            cell = add_new_cell(notebook, position, cell_type, source, cell_id=_new_cell_id(notebook))
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("add_cell", e, {"notebook_path": notebook_path})

        return OperationStatus(
            success=True,
            message=f"Successfully added {cell_type} cell at position {position}",
            details={"cell_index": position, "cell_type": cell_type, "cell_id": cell.get("id")},
        )

    @mcp_server.tool()
    @log_mcp_call
    def edit_cell(notebook_path: str, cell_id: str | int, new_source: str) -> OperationStatus:
        """Edit the source code of a specific cell by id or index.

        A string is looked up as a cell id (never as a number); an integer is a
        zero-based index.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_id (str | int): Cell id, or zero-based index of the cell
            new_source (str): New source for the cell

        Returns:
            OperationStatus: Result with the index of the edited cell
        """
        try:
            notebook = load_notebook(notebook_path)
            index = replace_source(notebook, cell_id, new_source)
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("edit_cell", e, {"notebook_path": notebook_path, "cell_id": cell_id})

        warnings = []
        if isinstance(cell_id, str) and cell_id in find_duplicate_ids(notebook):
            warnings.append(f"Several cells share id '{cell_id}'; edited the first one (index {index})")
        return OperationStatus(
            success=True,
            message=f"Successfully updated cell {cell_id}",
            details={"cell_index": index},
            warnings=warnings,
        )

    @mcp_server.tool()
    @log_mcp_call
    def delete_cell(notebook_path: str, cell_index: int) -> OperationStatus:
        """Delete a cell by index.

        The last remaining cell of a notebook cannot be deleted.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_index (int): Zero-based index of the cell to delete

        Returns:
            OperationStatus: Result with success status
        """
        try:
            notebook = load_notebook(notebook_path)
            remove_cell(notebook, cell_index)
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("delete_cell", e, {"notebook_path": notebook_path})

        return OperationStatus(
            success=True,
            message=f"Successfully deleted cell {cell_index}",
            details={"cell_index": cell_index, "remaining_cells": len(notebook)},
        )

    @mcp_server.tool()
    @log_mcp_call
    def move_cell(notebook_path: str, from_index: int, to_index: int) -> OperationStatus:
        """Move a cell from one position to another.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            from_index (int): Current index of the cell
            to_index (int): Index the cell will occupy afterwards (0 to number of cells - 1)

        Returns:
            OperationStatus: Result with success status
        """
        try:
            notebook = load_notebook(notebook_path)
            relocate_cell(notebook, from_index, to_index)
            save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("move_cell", e, {"notebook_path": notebook_path})

        return OperationStatus(
            success=True,
            message=f"Successfully moved cell from index {from_index} to {to_index}",
            details={"from_index": from_index, "to_index": to_index},
        )

    @mcp_server.tool()
    @log_mcp_call
    def convert_cell_type(notebook_path: str, cell_index: int, new_type: str) -> OperationStatus:
        """Convert a cell from one type to another.

        Converting to code adds an empty output list and a null execution count;
        converting away from code removes both.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_index (int): Zero-based index of the cell
            new_type (str): "code", "markdown" or "raw"

        Returns:
            OperationStatus: Result with old and new cell types
        """
        try:
            notebook = load_notebook(notebook_path)
            index = resolve_cell(notebook, cell_index)
            old_type = get_cell_type(notebook.cells[index])
            changed = convert_type(notebook, index, new_type)
            if changed:
                save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("convert_cell_type", e, {"notebook_path": notebook_path})

        if not changed:
            message = f"Cell {cell_index} is already of type '{new_type}'"
        else:
            message = f"Successfully converted cell {cell_index} from '{old_type}' to '{new_type}'"
        return OperationStatus(
            success=True,
            message=message,
            details={"cell_index": index, "old_type": old_type, "new_type": new_type, "changed": changed},
        )
