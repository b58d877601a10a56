"""Contract between the output merger and whatever runs the code."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from typing import Protocol

from .records import ExecutionEvent


class ExecutionBackend(Protocol):
    """Something that can run code for a notebook and stream the results back.

    The backend owns its sessions: one per notebook path, created on first use
    and kept until ``shutdown_all``.
    """

    async def get_session(self, notebook_path: str, kernel_name: str | None = None) -> Any:
        """Return the session for ``notebook_path``, starting one if needed.

        Raises:
            BackendUnavailableError: no session could be provided
        """
        ...

    def submit(self, session: Any, code: str) -> AsyncIterator[ExecutionEvent]:
        """Run ``code`` and yield output records, ending with one ExecutionStatus."""
        ...

    async def shutdown_all(self) -> None:
        """Dispose of every open session."""
        ...
