"""Batch editing of notebook cells.

Key Components:
- BatchExecutor: applies a list of cell operations to one loaded notebook
- EditOperation / DeleteOperation / ConvertOperation: the closed set of batch
  operation variants, discriminated by their ``type`` tag
- OperationResult / BatchApplyResult: per-operation and aggregate outcomes

Operations address cells by their index before the batch starts. Deletes run
first, then the remaining operations, each group from the highest index down,
so no operation shifts a cell that a later one still has to find.
"""

from .executor import BatchExecutor
from .models import BatchApplyResult
from .models import BatchOperation
from .models import ConvertOperation
from .models import DeleteOperation
from .models import EditOperation
from .models import OperationResult
from .models import parse_operation

__all__ = [
    # Models
    "BatchOperation",
    "EditOperation",
    "DeleteOperation",
    "ConvertOperation",
    "OperationResult",
    "BatchApplyResult",
    # Core Components
    "BatchExecutor",
    "parse_operation",
]
