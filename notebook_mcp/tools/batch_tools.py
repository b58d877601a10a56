"""Batch Operation Tools.

bulk_edit_cells applies a list of edit, delete and convert operations to one
notebook and writes the file once. Each operation succeeds or fails on its own;
the notebook reflects every operation that succeeded.
"""

from typing import Any

from mcp.server import FastMCP

from ..batch import BatchExecutor
from ..error_handler import handle_mcp_tool_error
from ..exceptions import NotebookMCPError
from ..logger_config import log_mcp_call
from ..models import OperationStatus
from ..notebook import load_notebook
from ..notebook import save_notebook


def register_batch_tools(mcp_server: FastMCP) -> None:
    """Register batch operation tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    def bulk_edit_cells(notebook_path: str, operations: list[dict[str, Any]]) -> OperationStatus:
        """Perform multiple cell operations in a single call.

        Operations are objects tagged by "type":
        - {"type": "edit", "cell_index": 2, "new_source": "x = 1"}
        - {"type": "delete", "cell_index": 3}
        - {"type": "convert", "cell_index": 0, "new_type": "markdown"}

        All deletes run first, from the highest index down; the remaining
        operations then run from the highest index down as well. Indices of
        edits and conversions refer to the notebook after the deletes. A failing
        operation is reported and skipped; the others still apply.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file
            operations (list[dict]): Operations to apply

        Returns:
            OperationStatus: success is True only when every operation succeeded;
            details carries the per-operation results
        """
        try:
            notebook = load_notebook(notebook_path)
        except NotebookMCPError as e:
            return handle_mcp_tool_error("bulk_edit_cells", e, {"notebook_path": notebook_path})

        result = BatchExecutor().execute_batch(notebook, operations)

        if result.successful_operations:
            try:
                save_notebook(notebook_path, notebook)
            except NotebookMCPError as e:
                return handle_mcp_tool_error(
                    "bulk_edit_cells",
                    e,
                    {"notebook_path": notebook_path, "successful_operations": result.successful_operations},
                )

        message = result.summary
        if result.errors:
            message += "\n\nErrors:\n" + "\n".join(result.errors)
        return OperationStatus(
            success=result.success,
            message=message,
            details=result.model_dump(),
        )
