"""Jupyter kernel execution backend.

One kernel per notebook path, started on first use with ``jupyter_client`` and
reused by later executions. IOPub messages belonging to a request become
output records; the shell ``execute_reply`` supplies the final status.

Sessions are created under a per-path lock, and each session runs one
execution at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from pathlib import Path
from typing import Any

from jupyter_client import AsyncKernelManager
from jupyter_client.kernelspec import NoSuchKernel

from ..config import get_settings
from ..exceptions import BackendUnavailableError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from .records import ErrorRecord
from .records import ExecutionEvent
from .records import ExecutionStatus
from .records import RichDataRecord
from .records import StreamRecord

logger = logging.getLogger(__name__)


class KernelSession:
    """A running kernel bound to one notebook."""

    def __init__(self, notebook_path: str, km: AsyncKernelManager, client: Any):
        self.notebook_path = notebook_path
        self.km = km
        self.client = client  # channels already started
        # held for the whole execute/collect cycle
        self.execution_lock = asyncio.Lock()

    @property
    def kernel_name(self) -> str:
        return self.km.kernel_name


class KernelSessionManager:
    """ExecutionBackend that runs cells on local Jupyter kernels."""

    def __init__(self, kernel_name: str | None = None, startup_timeout: float | None = None):
        settings = get_settings()
        self.kernel_name = kernel_name or settings.kernel_name
        self.startup_timeout = startup_timeout if startup_timeout is not None else settings.kernel_startup_timeout
        # resolved notebook path -> session
        self._sessions: dict[str, KernelSession] = {}
        self._start_locks: dict[str, asyncio.Lock] = {}

    @property
    def open_sessions(self) -> list[str]:
        return list(self._sessions)

    async def get_session(self, notebook_path: str, kernel_name: str | None = None) -> KernelSession:
        key = str(Path(notebook_path).resolve())
        lock = self._start_locks.setdefault(key, asyncio.Lock())
        async with lock:
            return await self._get_or_start(key, notebook_path, kernel_name)

    async def _get_or_start(self, key: str, notebook_path: str, kernel_name: str | None) -> KernelSession:
        session = self._sessions.get(key)
        if session is not None:
            if await session.km.is_alive():
                return session
            logger.warning("Kernel for %s died; starting a new one", key)
            self._sessions.pop(key)
            await self._dispose_quietly(key, session)

        candidates = [name for name in dict.fromkeys([kernel_name, self.kernel_name]) if name]
        last_error: Exception | None = None
        for name in candidates:
            try:
                session = await self._start(key, name)
            except NoSuchKernel as e:
                logger.info("Kernel spec %r not installed for %s", name, key)
                last_error = e
                continue
            except Exception as e:
                raise BackendUnavailableError(notebook_path, f"kernel '{name}' failed to start: {e}") from e
            self._sessions[key] = session
            return session

        raise BackendUnavailableError(notebook_path, f"no usable kernel spec among {candidates}: {last_error}")

    async def _start(self, key: str, kernel_name: str) -> KernelSession:
        km = AsyncKernelManager(kernel_name=kernel_name)
        await km.start_kernel(cwd=str(Path(key).parent))
        client = km.client()
        client.start_channels()
        try:
            await client.wait_for_ready(timeout=self.startup_timeout)
        except RuntimeError:
            client.stop_channels()
            await km.shutdown_kernel(now=True)
            raise
        logger.info("Started %s kernel for %s", kernel_name, key)
        return KernelSession(key, km, client)

    async def submit(self, session: KernelSession, code: str) -> AsyncIterator[ExecutionEvent]:
        async with session.execution_lock, aclosing(self._run(session, code)) as events:
            async for event in events:
                yield event

    async def _run(self, session: KernelSession, code: str) -> AsyncIterator[ExecutionEvent]:
        client = session.client
        msg_id = client.execute(code, store_history=True)

        while True:
            msg = await client.get_iopub_msg()
            if msg["parent_header"].get("msg_id") != msg_id:
                continue

            msg_type = msg["msg_type"]
            content = msg["content"]
            if msg_type == "status" and content.get("execution_state") == "idle":
                break
            if msg_type == "stream":
                yield StreamRecord(name=content.get("name", "stdout"), text=content.get("text", ""))
            elif msg_type in ("execute_result", "display_data"):
                yield RichDataRecord(
                    output_type=msg_type,
                    data=content.get("data", {}),
                    metadata=content.get("metadata", {}),
                    execution_count=content.get("execution_count"),
                )
            elif msg_type == "error":
                yield ErrorRecord(
                    ename=content.get("ename", ""),
                    evalue=content.get("evalue", ""),
                    traceback=content.get("traceback", []),
                )

        while True:
            reply = await client.get_shell_msg()
            if reply["parent_header"].get("msg_id") == msg_id:
                break
        content = reply["content"]
        yield ExecutionStatus(
            status="ok" if content.get("status") == "ok" else "error",
            execution_count=content.get("execution_count"),
            ename=content.get("ename", ""),
            evalue=content.get("evalue", ""),
            traceback=content.get("traceback", []),
        )

    async def _dispose(self, session: KernelSession) -> None:
        session.client.stop_channels()
        await session.km.shutdown_kernel(now=True)

    async def _dispose_quietly(self, key: str, session: KernelSession) -> bool:
        try:
            await self._dispose(session)
        except Exception as e:
            log_structured_error(
                category=ErrorCategory.WARNING,
                message=f"Failed to stop kernel for {key}",
                exception=e,
                operation="kernel_shutdown",
                context={"notebook_path": key},
            )
            return False
        logger.info("Stopped kernel for %s", key)
        return True

    async def shutdown_all(self) -> None:
        """Stop every kernel. A kernel that fails to stop does not keep the others running."""
        for key in list(self._sessions):
            await self._dispose_quietly(key, self._sessions.pop(key))
