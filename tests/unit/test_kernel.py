"""Unit tests for the Jupyter kernel backend with a mocked kernel manager."""

import asyncio
from collections import deque
from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest
from jupyter_client.kernelspec import NoSuchKernel

from notebook_mcp.exceptions import BackendUnavailableError
from notebook_mcp.execution import ErrorRecord
from notebook_mcp.execution import ExecutionStatus
from notebook_mcp.execution import KernelSessionManager
from notebook_mcp.execution import RichDataRecord
from notebook_mcp.execution import StreamRecord

pytestmark = pytest.mark.kernel


async def _yield_to_other_tasks(*args, **kwargs):
    await asyncio.sleep(0)


def _mock_kernel_manager(kernel_name="python3"):
    km = MagicMock()
    km.kernel_name = kernel_name
    km.start_kernel = AsyncMock(side_effect=_yield_to_other_tasks)
    km.shutdown_kernel = AsyncMock()
    km.is_alive = AsyncMock(return_value=True)
    client = MagicMock()
    client.wait_for_ready = AsyncMock()
    client.get_iopub_msg = AsyncMock()
    client.get_shell_msg = AsyncMock()
    km.client.return_value = client
    return km


@pytest.fixture
def kernel_managers(mocker):
    """Patch AsyncKernelManager; every instantiation returns a fresh mock."""
    created = []

    def _factory(kernel_name):
        if kernel_name == "missing-kernel":
            km = _mock_kernel_manager(kernel_name)
            km.start_kernel.side_effect = NoSuchKernel(kernel_name)
        else:
            km = _mock_kernel_manager(kernel_name)
        created.append(km)
        return km

    mocker.patch("notebook_mcp.execution.kernel.AsyncKernelManager", side_effect=_factory)
    return created


def _msg(msg_type, content, parent="msg-1"):
    return {"msg_type": msg_type, "content": content, "parent_header": {"msg_id": parent}}


class _SharedChannelClient:
    """Kernel client whose IOPub and shell channels are shared by every request.

    Each ``execute`` queues two stream messages, the idle status and the reply
    at once, the way a kernel publishes them while other requests still read.
    """

    def __init__(self):
        self.iopub = deque()
        self.shell = deque()
        self.executed = 0

    def execute(self, code, store_history=True):
        self.executed += 1
        msg_id = f"msg-{code}"
        for text in (code, code + "2"):
            self.iopub.append(_msg("stream", {"name": "stdout", "text": text}, parent=msg_id))
        self.iopub.append(_msg("status", {"execution_state": "idle"}, parent=msg_id))
        self.shell.append(_msg("execute_reply", {"status": "ok", "execution_count": self.executed}, parent=msg_id))
        return msg_id

    async def get_iopub_msg(self):
        await asyncio.sleep(0)
        return self.iopub.popleft()

    async def get_shell_msg(self):
        await asyncio.sleep(0)
        return self.shell.popleft()


class TestGetSession:
    async def test_starts_one_kernel_per_notebook(self, kernel_managers, tmp_path):
        manager = KernelSessionManager(kernel_name="python3", startup_timeout=5)
        path = str(tmp_path / "a.ipynb")

        first = await manager.get_session(path)
        second = await manager.get_session(path)

        assert first is second
        assert len(kernel_managers) == 1
        kernel_managers[0].start_kernel.assert_awaited_once_with(cwd=str(tmp_path.resolve()))
        first.client.wait_for_ready.assert_awaited_once_with(timeout=5)
        assert manager.open_sessions == [str((tmp_path / "a.ipynb").resolve())]

    async def test_separate_notebooks_get_separate_kernels(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        await manager.get_session(str(tmp_path / "a.ipynb"))
        await manager.get_session(str(tmp_path / "b.ipynb"))
        assert len(kernel_managers) == 2

    async def test_falls_back_to_default_kernel(self, kernel_managers, tmp_path):
        manager = KernelSessionManager(kernel_name="python3")

        session = await manager.get_session(str(tmp_path / "a.ipynb"), kernel_name="missing-kernel")

        assert session.kernel_name == "python3"
        assert [km.kernel_name for km in kernel_managers] == ["missing-kernel", "python3"]

    async def test_no_usable_kernel(self, kernel_managers, tmp_path):
        manager = KernelSessionManager(kernel_name="missing-kernel")
        with pytest.raises(BackendUnavailableError, match="no usable kernel spec"):
            await manager.get_session(str(tmp_path / "a.ipynb"))
        assert manager.open_sessions == []

    async def test_kernel_not_ready_in_time(self, kernel_managers, mocker, tmp_path):
        km = _mock_kernel_manager()
        km.client.return_value.wait_for_ready.side_effect = RuntimeError("Kernel didn't respond in 30 seconds")
        mocker.patch("notebook_mcp.execution.kernel.AsyncKernelManager", return_value=km)

        with pytest.raises(BackendUnavailableError, match="failed to start"):
            await KernelSessionManager().get_session(str(tmp_path / "a.ipynb"))

        km.client.return_value.stop_channels.assert_called_once()
        km.shutdown_kernel.assert_awaited_once_with(now=True)

    async def test_dead_kernel_is_replaced(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        path = str(tmp_path / "a.ipynb")
        first = await manager.get_session(path)
        first.km.is_alive.return_value = False

        second = await manager.get_session(path)

        assert second is not first
        first.km.shutdown_kernel.assert_awaited_once_with(now=True)

    async def test_concurrent_requests_share_one_kernel(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        path = str(tmp_path / "a.ipynb")

        first, second = await asyncio.gather(manager.get_session(path), manager.get_session(path))
        await manager.shutdown_all()

        assert first is second
        assert len(kernel_managers) == 1
        kernel_managers[0].shutdown_kernel.assert_awaited_once_with(now=True)


class TestSubmit:
    async def test_translates_iopub_messages(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        session = await manager.get_session(str(tmp_path / "a.ipynb"))
        client = session.client
        client.execute.return_value = "msg-1"
        client.get_iopub_msg.side_effect = [
            _msg("status", {"execution_state": "busy"}),
            _msg("stream", {"name": "stdout", "text": "other request"}, parent="msg-0"),
            _msg("execute_input", {"code": "..."}),
            _msg("stream", {"name": "stdout", "text": "hello\n"}),
            _msg("display_data", {"data": {"text/html": "<b>x</b>"}, "metadata": {}}),
            _msg("execute_result", {"data": {"text/plain": "3"}, "metadata": {}, "execution_count": 2}),
            _msg("error", {"ename": "E", "evalue": "v", "traceback": ["t"]}),
            _msg("status", {"execution_state": "idle"}),
        ]
        client.get_shell_msg.side_effect = [
            _msg("execute_reply", {"status": "ok"}, parent="msg-0"),
            _msg("execute_reply", {"status": "error", "execution_count": 2, "ename": "E", "evalue": "v"}),
        ]

        events = [event async for event in manager.submit(session, "code")]

        client.execute.assert_called_once_with("code", store_history=True)
        assert events == [
            StreamRecord(name="stdout", text="hello\n"),
            RichDataRecord(output_type="display_data", data={"text/html": "<b>x</b>"}),
            RichDataRecord(output_type="execute_result", data={"text/plain": "3"}, execution_count=2),
            ErrorRecord(ename="E", evalue="v", traceback=["t"]),
            ExecutionStatus(status="error", execution_count=2, ename="E", evalue="v"),
        ]

    async def test_concurrent_executions_run_one_at_a_time(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        session = await manager.get_session(str(tmp_path / "a.ipynb"))
        session.client = _SharedChannelClient()

        async def run(code):
            return [event async for event in manager.submit(session, code)]

        first, second = await asyncio.gather(run("a"), run("b"))

        assert first == [
            StreamRecord(name="stdout", text="a"),
            StreamRecord(name="stdout", text="a2"),
            ExecutionStatus(status="ok", execution_count=1),
        ]
        assert second == [
            StreamRecord(name="stdout", text="b"),
            StreamRecord(name="stdout", text="b2"),
            ExecutionStatus(status="ok", execution_count=2),
        ]


class TestShutdownAll:
    async def test_stops_every_kernel(self, kernel_managers, tmp_path):
        manager = KernelSessionManager()
        await manager.get_session(str(tmp_path / "a.ipynb"))
        await manager.get_session(str(tmp_path / "b.ipynb"))

        await manager.shutdown_all()

        assert manager.open_sessions == []
        for km in kernel_managers:
            km.shutdown_kernel.assert_awaited_once_with(now=True)
            km.client.return_value.stop_channels.assert_called_once()

    async def test_failure_to_stop_one_kernel_does_not_block_the_rest(self, kernel_managers, mocker, tmp_path):
        mock_log = mocker.patch("notebook_mcp.execution.kernel.log_structured_error")
        manager = KernelSessionManager()
        await manager.get_session(str(tmp_path / "a.ipynb"))
        await manager.get_session(str(tmp_path / "b.ipynb"))
        kernel_managers[0].shutdown_kernel.side_effect = RuntimeError("zombie kernel")

        await manager.shutdown_all()

        assert manager.open_sessions == []
        kernel_managers[1].shutdown_kernel.assert_awaited_once_with(now=True)
        mock_log.assert_called_once()
        assert mock_log.call_args.kwargs["operation"] == "kernel_shutdown"
