"""Cell execution: backend contract, kernel sessions and output merging."""

from .backend import ExecutionBackend
from .kernel import KernelSessionManager
from .merger import ExecutionOutcome
from .merger import execute_cell
from .merger import render_outputs
from .records import ErrorRecord
from .records import ExecutionStatus
from .records import RichDataRecord
from .records import StreamRecord

__all__ = [
    "ErrorRecord",
    "ExecutionBackend",
    "ExecutionOutcome",
    "ExecutionStatus",
    "KernelSessionManager",
    "RichDataRecord",
    "StreamRecord",
    "execute_cell",
    "render_outputs",
]
