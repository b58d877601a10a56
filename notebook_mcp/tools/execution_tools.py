"""Execution and Output Tools.

- read_notebook_with_outputs: every cell with its source and rendered outputs
- execute_cell: run a code cell on the notebook's kernel and store the results
"""

from mcp.server import FastMCP

from ..error_handler import handle_mcp_tool_error
from ..exceptions import NotebookMCPError
from ..execution import ExecutionBackend
from ..execution import execute_cell as run_cell
from ..execution import render_outputs
from ..logger_config import log_mcp_call
from ..models import CellType
from ..models import CellWithOutputs
from ..models import OperationStatus
from ..notebook import cell_source
from ..notebook import cell_type as get_cell_type
from ..notebook import find_duplicate_ids
from ..notebook import load_notebook
from ..notebook import save_notebook


def _format_cell(cell: CellWithOutputs) -> str:
    header = f"[{cell.index}] {cell.cell_type}"
    if cell.cell_type == CellType.CODE.value:
        count = cell.execution_count if cell.execution_count is not None else " "
        header += f" [{count}]"
    block = f"{header}\n{cell.source}"
    if cell.outputs_text:
        block += f"\n--- output ---\n{cell.outputs_text}"
    return block


def register_execution_tools(mcp_server: FastMCP, backend: ExecutionBackend) -> None:
    """Register execution tools with the MCP server.

    ``backend`` runs the code; one kernel session per notebook is kept alive
    between calls until the backend is shut down.
    """

    @mcp_server.tool()
    @log_mcp_call
    def read_notebook_with_outputs(notebook_path: str) -> OperationStatus:
        """Read all cells of a notebook including their execution outputs.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file

        Returns:
            OperationStatus: message renders every cell with its output text
        """
        try:
            notebook = load_notebook(notebook_path)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("read_notebook_with_outputs", e, {"notebook_path": notebook_path})

        cells = [
            CellWithOutputs(
                index=index,
                cell_type=get_cell_type(cell),
                source=cell_source(cell),
                execution_count=cell.get("execution_count"),
                outputs_text=render_outputs(cell.get("outputs") or []),
                cell_id=cell.get("id"),
            )
            for index, cell in enumerate(notebook.cells)
        ]
        return OperationStatus(
            success=True,
            message="\n\n".join(_format_cell(cell) for cell in cells),
            details={"total_cells": len(cells), "cells": [cell.model_dump() for cell in cells]},
        )

    @mcp_server.tool()
    @log_mcp_call
    async def execute_cell(notebook_path: str, cell_id: str | int) -> OperationStatus:
        """Execute a code cell and store its outputs in the notebook.

        The notebook's kernel is started on first use and reused afterwards, so
        variables persist between executions. A cell that raises still gets its
        partial outputs and the error saved.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            cell_id (str | int): Cell id, or zero-based index of the cell

        Returns:
            OperationStatus: success mirrors the kernel's status; details carries the
            execution count and outputs
        """
        context = {"notebook_path": notebook_path, "cell_id": cell_id}
        try:
            notebook = load_notebook(notebook_path)
            outcome = await run_cell(notebook, cell_id, backend)
            if not outcome.skipped:
                save_notebook(notebook_path, notebook)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("execute_cell", e, context)

        if outcome.skipped:
            return OperationStatus(
                success=True,
                message=f"Cell {outcome.cell_index} is empty; nothing to execute",
                details=outcome.model_dump(),
            )

        warnings = []
        if isinstance(cell_id, str) and cell_id in find_duplicate_ids(notebook):
            warnings.append(f"Several cells share id '{cell_id}'; executed the first one (index {outcome.cell_index})")

        output_text = render_outputs(outcome.outputs)
        if outcome.success:
            message = f"Executed cell {outcome.cell_index} [{outcome.execution_count}]"
        else:
            message = f"Cell {outcome.cell_index} raised {outcome.error_name}: {outcome.error_value}"
        if output_text:
            message += f"\n\n{output_text}"
        return OperationStatus(
            success=outcome.success,
            message=message,
            details=outcome.model_dump(),
            warnings=warnings,
        )
