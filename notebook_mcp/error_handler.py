"""Error handling utilities for the Notebook MCP tools.

Turns engine exceptions into failed ``OperationStatus`` responses so the MCP
transport always receives a description string plus an error flag.
"""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import NotebookMCPError
from .logger_config import ErrorCategory
from .logger_config import log_structured_error
from .models import OperationStatus

logger = logging.getLogger(__name__)


def create_error_response(error: Exception, operation: str) -> OperationStatus:
    """Build a failed OperationStatus from an exception."""
    if isinstance(error, NotebookMCPError):
        details = dict(error.details)
        details.update({"error_code": error.error_code, "operation": operation})
        return OperationStatus(success=False, message=error.user_message, details=details)

    return OperationStatus(
        success=False,
        message=f"An unexpected error occurred during {operation}: {error}",
        details={
            "error_code": "UNEXPECTED_ERROR",
            "error_type": type(error).__name__,
            "operation": operation,
        },
    )


def handle_mcp_tool_error(
    tool_name: str, error: Exception, context: dict[str, Any] | None = None
) -> OperationStatus:
    """Log a tool failure and convert it to an error response."""
    if isinstance(error, NotebookMCPError):
        logger.error(
            f"Tool {tool_name} failed: {error.message}",
            extra={"error_code": error.error_code, "context": context or {}},
        )
        category = ErrorCategory.WARNING
    else:
        logger.error(
            f"Tool {tool_name} failed unexpectedly: {error}",
            exc_info=True,
            extra={"context": context or {}},
        )
        category = ErrorCategory.ERROR

    log_structured_error(
        category=category,
        message=f"Tool {tool_name} failed",
        exception=error,
        context=context,
        operation=tool_name,
    )
    return create_error_response(error, tool_name)
