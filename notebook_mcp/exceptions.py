"""Exception hierarchy for the Notebook MCP system.

Every error raised by the mutation engine derives from ``NotebookMCPError`` so the
tool layer can turn it into a failed ``OperationStatus`` with a stable error code.
"""

from __future__ import annotations

from typing import Any


class NotebookMCPError(Exception):
    """Base class for all Notebook MCP errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for structured responses."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(NotebookMCPError):
    """Raised when tool input fails validation."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if field is not None:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = value
        super().__init__(message, error_code="VALIDATION_ERROR", details=details)


class NotebookIOError(NotebookMCPError):
    """The notebook file could not be read or written."""

    def __init__(self, path: str, operation: str, reason: str):
        super().__init__(
            f"Failed to {operation} notebook '{path}': {reason}",
            error_code="NOTEBOOK_IO_ERROR",
            details={"notebook_path": path, "operation": operation, "failure_reason": reason},
        )


class NotebookFormatError(NotebookMCPError):
    """The notebook file is not a well-formed notebook document."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Malformed notebook '{path}': {reason}",
            error_code="NOTEBOOK_FORMAT_ERROR",
            details={"notebook_path": path, "failure_reason": reason},
        )


class CellIndexError(NotebookMCPError):
    """A positional cell reference falls outside the current cell range."""

    def __init__(self, given: Any, length: int, upper: int | None = None, label: str = "cell index"):
        if upper is None:
            upper = length - 1
        super().__init__(
            f"Invalid {label} {given}. Notebook has {length} cells (valid range 0-{upper})",
            error_code="INDEX_OUT_OF_RANGE",
            details={"given": given, "length": length},
        )
        self.given = given
        self.length = length


class CellNotFoundError(NotebookMCPError):
    """No cell carries the requested identifier."""

    def __init__(self, identifier: str):
        super().__init__(
            f"Cell with id '{identifier}' not found",
            error_code="CELL_NOT_FOUND",
            details={"identifier": identifier},
            user_message=f"No cell with id '{identifier}' exists in this notebook.",
        )
        self.identifier = identifier


class InvalidCellTypeError(NotebookMCPError):
    """The requested cell type is not one of the supported kinds."""

    def __init__(self, cell_type: Any, supported: list[str]):
        super().__init__(
            f"Invalid cell type '{cell_type}'. Supported types: {', '.join(supported)}",
            error_code="INVALID_CELL_TYPE",
            details={"cell_type": cell_type, "supported": supported},
        )


class LastCellError(NotebookMCPError):
    """Deleting the only remaining cell is not allowed."""

    def __init__(self):
        super().__init__(
            "Cannot delete the last remaining cell in the notebook",
            error_code="LAST_CELL",
        )


class NotExecutableError(NotebookMCPError):
    """Only code cells can be executed."""

    def __init__(self, index: int, cell_type: str):
        super().__init__(
            f"Cell {index} is a {cell_type} cell; only code cells can be executed",
            error_code="NOT_EXECUTABLE",
            details={"cell_index": index, "cell_type": cell_type},
        )


class BackendUnavailableError(NotebookMCPError):
    """The execution backend could not provide a session."""

    def __init__(self, notebook_path: str, reason: str):
        super().__init__(
            f"Execution backend unavailable for '{notebook_path}': {reason}",
            error_code="BACKEND_UNAVAILABLE",
            details={"notebook_path": notebook_path, "failure_reason": reason},
        )


class UnknownOperationError(NotebookMCPError):
    """A batch entry carries a tag that is not a supported operation."""

    def __init__(self, operation_type: Any):
        super().__init__(
            f"Unknown operation type: {operation_type}",
            error_code="UNKNOWN_OPERATION",
            details={"operation_type": operation_type},
        )
