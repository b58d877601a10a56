"""Pydantic models for the Notebook MCP system.

This module contains the response models returned by the MCP tools. Batch
operation models live in ``notebook_mcp.batch.models`` and execution records
in ``notebook_mcp.execution.records``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class CellType(str, Enum):
    """Cell kinds supported by the mutation engine."""

    CODE = "code"
    MARKDOWN = "markdown"
    RAW = "raw"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


# === Core Operation Models ===


class OperationStatus(BaseModel):
    """Generic status for tool operations."""

    success: bool
    message: str
    details: dict[str, Any] | None = None  # For extra info, e.g., new cell index
    warnings: list[str] = []


# === Cell Listing Models ===


class CellSummary(BaseModel):
    """One row of a notebook listing."""

    index: int
    cell_type: str
    preview: str
    cell_id: str | None = None


class CellWithOutputs(BaseModel):
    """A cell's source together with the text rendering of its outputs."""

    index: int
    cell_type: str
    source: str
    execution_count: int | None = None
    outputs_text: str = ""
    cell_id: str | None = None
