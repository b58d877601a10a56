"""Batch operation models for notebook editing.

The operation variants form a closed union keyed on ``type``. Adding a new
kind of batch operation means adding a model here and a branch in
``BatchExecutor._apply_operation``.
"""

from typing import Annotated
from typing import Any
from typing import Literal
from typing import Union

import pydantic
from pydantic import BaseModel
from pydantic import Field
from pydantic import StrictInt
from pydantic import TypeAdapter

from ..exceptions import UnknownOperationError
from ..exceptions import ValidationError


class EditOperation(BaseModel):
    """Replace the source of the cell at ``cell_index``."""

    type: Literal["edit"] = "edit"
    cell_index: StrictInt
    new_source: str


class DeleteOperation(BaseModel):
    """Remove the cell at ``cell_index``."""

    type: Literal["delete"] = "delete"
    cell_index: StrictInt


class ConvertOperation(BaseModel):
    """Change the type of the cell at ``cell_index``."""

    type: Literal["convert"] = "convert"
    cell_index: StrictInt
    new_type: str


BatchOperation = Annotated[
    Union[EditOperation, DeleteOperation, ConvertOperation],
    Field(discriminator="type"),
]

OPERATION_TYPES = ("edit", "delete", "convert")

_operation_adapter: TypeAdapter = TypeAdapter(BatchOperation)


def parse_operation(raw: Any) -> EditOperation | DeleteOperation | ConvertOperation:
    """Validate one batch entry.

    Raises:
        UnknownOperationError: the entry's ``type`` is missing or unsupported
        ValidationError: the entry's fields do not match its type
    """
    if isinstance(raw, (EditOperation, DeleteOperation, ConvertOperation)):
        return raw
    if not isinstance(raw, dict):
        raise ValidationError(f"Batch operation must be an object, got {type(raw).__name__}")
    if raw.get("type") not in OPERATION_TYPES:
        raise UnknownOperationError(raw.get("type"))
    try:
        return _operation_adapter.validate_python(raw)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"][1:]) or None
        raise ValidationError(f"Invalid {raw['type']} operation: {field}: {first['msg']}", field=field) from e


class OperationResult(BaseModel):
    """Result of applying a single batch operation."""

    operation_type: str = Field(..., description="Tag of the operation, as given")
    cell_index: Any = Field(default=None, description="Pre-batch cell index the operation targeted")
    success: bool = Field(..., description="Whether the operation was applied")
    error: str | None = Field(default=None, description="Error message if failed")
    error_code: str | None = Field(default=None, description="Error code if failed")

    def describe_failure(self) -> str:
        return f"Operation {self.operation_type} on cell {self.cell_index}: {self.error}"


class BatchApplyResult(BaseModel):
    """Aggregate result of applying a batch to one notebook."""

    success: bool = Field(..., description="True when every operation was applied")
    total_operations: int = Field(..., description="Total number of operations")
    successful_operations: int = Field(default=0, description="Number of successful operations")
    failed_operations: int = Field(default=0, description="Number of failed operations")
    operation_results: list[OperationResult] = Field(
        default_factory=list, description="Individual results in application order"
    )
    errors: list[str] = Field(default_factory=list, description="Failure descriptions in application order")
    summary: str = Field(default="", description="Human-readable execution summary")
