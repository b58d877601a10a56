"""Shared test utilities for Notebook MCP tests."""

from .notebooks import FakeBackend
from .notebooks import code_cell
from .notebooks import make_notebook
from .notebooks import markdown_cell
from .notebooks import raw_cell

__all__ = ["FakeBackend", "code_cell", "make_notebook", "markdown_cell", "raw_cell"]
