"""Fold execution results into a code cell.

The merger collects every record of an execution before it touches the cell,
then replaces the cell's outputs and execution count in one step. A failed
execution is a result, not an engine fault: the cell still receives the
partial outputs and a trailing error, and the caller saves the notebook.
"""

from __future__ import annotations

import logging
import re
from contextlib import aclosing
from typing import Any

from pydantic import BaseModel
from pydantic import Field

from ..exceptions import BackendUnavailableError
from ..exceptions import NotebookMCPError
from ..exceptions import NotExecutableError
from ..models import CellType
from ..notebook import Notebook
from ..notebook import cell_source
from ..notebook import cell_type
from ..notebook import resolve_cell
from ..notebook.locator import CellRef
from .backend import ExecutionBackend
from .records import ErrorRecord
from .records import ExecutionStatus
from .records import OutputRecord

logger = logging.getLogger(__name__)

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


class ExecutionOutcome(BaseModel):
    """What happened when a cell was executed."""

    success: bool
    cell_index: int
    skipped: bool = Field(default=False, description="True when the cell was blank and nothing ran")
    execution_count: int | None = None
    outputs: list[dict[str, Any]] = Field(default_factory=list)
    error_name: str | None = None
    error_value: str | None = None


async def _collect(backend: ExecutionBackend, session: Any, code: str, path: str):
    records: list[OutputRecord] = []
    try:
        async with aclosing(backend.submit(session, code)) as events:
            async for event in events:
                if isinstance(event, ExecutionStatus):
                    return records, event
                records.append(event)
    except NotebookMCPError:
        raise
    except Exception as e:
        raise BackendUnavailableError(path, f"execution stream failed: {e}") from e
    raise BackendUnavailableError(path, "execution stream ended without a status")


async def execute_cell(notebook: Notebook, ref: CellRef, backend: ExecutionBackend) -> ExecutionOutcome:
    """Run the referenced code cell on ``backend`` and merge the results into it."""
    index = resolve_cell(notebook, ref)
    cell = notebook.cells[index]
    if cell_type(cell) != CellType.CODE.value:
        raise NotExecutableError(index, cell_type(cell))

    code = cell_source(cell)
    if not code.strip():
        return ExecutionOutcome(success=True, cell_index=index, skipped=True)

    path = notebook.path or "<memory>"
    session = await backend.get_session(path, notebook.kernel_name)
    records, status = await _collect(backend, session, code, path)

    if status.status == "error" and not (records and isinstance(records[-1], ErrorRecord)):
        records.append(status.to_error_record())

    outputs = [record.to_output() for record in records]
    cell["outputs"] = outputs
    cell["execution_count"] = status.execution_count
    logger.info("Executed cell %d of %s: %s", index, path, status.status)

    return ExecutionOutcome(
        success=status.status == "ok",
        cell_index=index,
        execution_count=status.execution_count,
        outputs=outputs,
        error_name=status.ename or None,
        error_value=status.evalue or None,
    )


def render_outputs(outputs: list[dict[str, Any]]) -> str:
    """Flatten nbformat outputs into plain text."""
    parts: list[str] = []
    for output in outputs:
        output_type = output.get("output_type")
        if output_type == "stream":
            text = output.get("text", "")
            parts.append("".join(text) if isinstance(text, list) else text)
        elif output_type in ("execute_result", "display_data"):
            data = output.get("data", {})
            if "text/plain" in data:
                text = data["text/plain"]
                parts.append("".join(text) if isinstance(text, list) else text)
            else:
                parts.append(" ".join(f"[{mime}]" for mime in data) or "[empty output]")
        elif output_type == "error":
            lines = [f"{output.get('ename', '')}: {output.get('evalue', '')}"]
            lines.extend(_ANSI_ESCAPE.sub("", line) for line in output.get("traceback", []))
            parts.append("\n".join(lines))
        else:
            parts.append(f"[{output_type} output]")
    return "\n".join(part.rstrip("\n") for part in parts)
