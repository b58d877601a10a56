"""Notebook MCP: an MCP tool server for editing and executing Jupyter notebooks."""
