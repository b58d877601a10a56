"""Batch execution engine for notebook cell operations.

All operations in a batch refer to cells by the index they had before the
batch started. The executor keeps those indices valid by ordering the work:
deletes first, then everything else, and inside each group from the highest
index to the lowest. A failing operation is recorded and skipped; the
operations before and after it still apply.
"""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import NotebookMCPError
from ..exceptions import UnknownOperationError
from ..logger_config import ErrorCategory
from ..logger_config import safe_operation
from ..notebook import Notebook
from ..notebook import convert_cell_type
from ..notebook import delete_cell
from ..notebook import edit_cell_source
from .models import BatchApplyResult
from .models import ConvertOperation
from .models import DeleteOperation
from .models import EditOperation
from .models import OperationResult
from .models import parse_operation

logger = logging.getLogger(__name__)


class _Entry:
    """A batch entry with its parsed operation or the reason it could not be parsed."""

    def __init__(self, raw: Any):
        self.raw = raw
        self.operation = None
        self.parse_error: Exception | None = None
        try:
            self.operation = parse_operation(raw)
        except NotebookMCPError as e:
            self.parse_error = e

    @property
    def operation_type(self) -> str:
        if self.operation is not None:
            return self.operation.type
        return str(self.raw.get("type")) if isinstance(self.raw, dict) else type(self.raw).__name__

    @property
    def cell_index(self) -> Any:
        if self.operation is not None:
            return self.operation.cell_index
        return self.raw.get("cell_index") if isinstance(self.raw, dict) else None

    def sort_key(self) -> tuple[int, float]:
        group = 0 if self.operation_type == "delete" else 1
        index = self.cell_index
        if isinstance(index, bool) or not isinstance(index, int):
            # unusable indices go after every real one in their group
            return group, float("inf")
        return group, -index


class BatchExecutor:
    """Apply heterogeneous cell operations to one notebook with partial-success semantics."""

    def execute_batch(self, notebook: Notebook, operations: list[Any]) -> BatchApplyResult:
        """Apply ``operations`` to ``notebook`` in place.

        Args:
            notebook: The loaded notebook to mutate
            operations: Raw operation dicts (or already parsed operations)

        Returns:
            BatchApplyResult: counts, per-operation results and failure descriptions
        """
        entries = sorted((_Entry(raw) for raw in operations), key=_Entry.sort_key)

        results: list[OperationResult] = []
        for entry in entries:
            results.append(self._run_entry(notebook, entry))

        successful = sum(1 for result in results if result.success)
        failed = len(results) - successful
        errors = [result.describe_failure() for result in results if not result.success]

        return BatchApplyResult(
            success=failed == 0,
            total_operations=len(results),
            successful_operations=successful,
            failed_operations=failed,
            operation_results=results,
            errors=errors,
            summary=f"Bulk operation completed: {successful}/{len(results)} operations successful",
        )

    def _run_entry(self, notebook: Notebook, entry: _Entry) -> OperationResult:
        if entry.parse_error is not None:
            error: Exception | None = entry.parse_error
        else:
            success, _, error = safe_operation(
                entry.operation_type,
                self._apply_operation,
                notebook,
                entry.operation,
                error_category=ErrorCategory.WARNING,
                context={"batch_operation": entry.operation_type, "cell_index": entry.cell_index},
            )
            if success:
                return OperationResult(
                    operation_type=entry.operation_type, cell_index=entry.cell_index, success=True
                )

        logger.info("Batch %s on cell %s failed: %s", entry.operation_type, entry.cell_index, error)
        if isinstance(error, NotebookMCPError):
            message, code = error.message, error.error_code
        else:
            message, code = str(error), "UNEXPECTED_ERROR"
        return OperationResult(
            operation_type=entry.operation_type,
            cell_index=entry.cell_index,
            success=False,
            error=message,
            error_code=code,
        )

    @staticmethod
    def _apply_operation(notebook: Notebook, operation) -> None:
        if isinstance(operation, DeleteOperation):
            delete_cell(notebook, operation.cell_index)
        elif isinstance(operation, EditOperation):
            edit_cell_source(notebook, operation.cell_index, operation.new_source)
        elif isinstance(operation, ConvertOperation):
            convert_cell_type(notebook, operation.cell_index, operation.new_type)
        else:
            raise UnknownOperationError(type(operation).__name__)
