"""MCP tool registrations for the notebook server."""

from .batch_tools import register_batch_tools
from .cell_tools import register_cell_tools
from .editor_tools import register_editor_tools
from .execution_tools import register_execution_tools

__all__ = [
    "register_batch_tools",
    "register_cell_tools",
    "register_editor_tools",
    "register_execution_tools",
]
