"""Clean client interface for Notebook MCP tools.

This module provides a plain Python interface to all registered MCP tools, so
tests and scripts can call them without going through an MCP transport.

All functions in this module correspond directly to registered MCP tools.
"""

from __future__ import annotations

from typing import Any

# Import the MCP server to access registered tools
from .nb_tool_server import mcp_server


def _get_mcp_tool(tool_name: str):
    """Get a registered MCP tool function by name."""
    if (
        hasattr(mcp_server, "_tool_manager")
        and hasattr(mcp_server._tool_manager, "_tools")
        and tool_name in mcp_server._tool_manager._tools
    ):
        tool = mcp_server._tool_manager._tools[tool_name]
        if hasattr(tool, "fn"):
            return tool.fn
    raise RuntimeError(f"MCP tool '{tool_name}' not found or not properly registered")


# Cell reading tools
def list_cells(notebook_path: str):
    """List all cells with index, type and a source preview."""
    return _get_mcp_tool("list_cells")(notebook_path)


def get_cell_source(notebook_path: str, cell_index: int):
    """Get the full source of a cell."""
    return _get_mcp_tool("get_cell_source")(notebook_path, cell_index)


def read_notebook_with_outputs(notebook_path: str):
    """Read every cell with its rendered outputs."""
    return _get_mcp_tool("read_notebook_with_outputs")(notebook_path)


# Cell editing tools
def edit_cell_source(notebook_path: str, cell_index: int, new_source: str):
    """Replace a cell's source by index."""
    return _get_mcp_tool("edit_cell_source")(notebook_path, cell_index, new_source)


def edit_cell(notebook_path: str, cell_id: str | int, new_source: str):
    """Replace a cell's source by id or index."""
    return _get_mcp_tool("edit_cell")(notebook_path, cell_id, new_source)


def insert_cell(notebook_path: str, position: int, cell_type: str = "code", source: str = ""):
    """Insert a new cell at a position."""
    return _get_mcp_tool("insert_cell")(notebook_path, position, cell_type, source)


def add_cell(notebook_path: str, source: str = "", cell_type: str = "code", position: int | None = None):
    """Add a new cell, at the end by default."""
    return _get_mcp_tool("add_cell")(notebook_path, source, cell_type, position)


def delete_cell(notebook_path: str, cell_index: int):
    """Delete a cell."""
    return _get_mcp_tool("delete_cell")(notebook_path, cell_index)


def move_cell(notebook_path: str, from_index: int, to_index: int):
    """Move a cell to another position."""
    return _get_mcp_tool("move_cell")(notebook_path, from_index, to_index)


def convert_cell_type(notebook_path: str, cell_index: int, new_type: str):
    """Convert a cell to code, markdown or raw."""
    return _get_mcp_tool("convert_cell_type")(notebook_path, cell_index, new_type)


# Batch tools
def bulk_edit_cells(notebook_path: str, operations: list[dict[str, Any]]):
    """Apply several edit/delete/convert operations with one save."""
    return _get_mcp_tool("bulk_edit_cells")(notebook_path, operations)


# Execution tools
async def execute_cell(notebook_path: str, cell_id: str | int):
    """Execute a code cell and store its outputs."""
    return await _get_mcp_tool("execute_cell")(notebook_path, cell_id)


# Editor tools
def trigger_vscode_reload(notebook_path: str):
    """Touch the notebook so an open editor reloads it."""
    return _get_mcp_tool("trigger_vscode_reload")(notebook_path)
