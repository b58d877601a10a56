"""Editor integration tools."""

from mcp.server import FastMCP

from ..error_handler import handle_mcp_tool_error
from ..exceptions import NotebookIOError
from ..logger_config import log_mcp_call
from ..models import OperationStatus
from ..storage import get_storage


def register_editor_tools(mcp_server: FastMCP) -> None:
    """Register editor integration tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    def trigger_vscode_reload(notebook_path: str) -> OperationStatus:
        """Bump the notebook's modification time so an open editor reloads it.

        Parameters:
            notebook_path (str): Absolute path to the .ipynb file

        Returns:
            OperationStatus: Result with success status
        """
        try:
            get_storage().touch(notebook_path)
        except OSError as e:
            return handle_mcp_tool_error(
                "trigger_vscode_reload",
                NotebookIOError(notebook_path, "touch", str(e)),
                {"notebook_path": notebook_path},
            )

        return OperationStatus(success=True, message=f"Triggered VS Code reload for: {notebook_path}")
