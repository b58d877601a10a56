"""Unit tests for logger_config: structured error logging and the tool call decorator."""

import json
import logging
import sys

import pytest

from notebook_mcp.logger_config import ErrorCategory
from notebook_mcp.logger_config import StructuredLogFormatter
from notebook_mcp.logger_config import log_mcp_call
from notebook_mcp.logger_config import log_structured_error
from notebook_mcp.logger_config import safe_operation


class TestStructuredLogFormatter:
    def test_basic_record(self):
        record = logging.LogRecord("test_logger", logging.ERROR, "test.py", 10, "Test message", (), None)
        data = json.loads(StructuredLogFormatter().format(record))
        assert data["level"] == "ERROR"
        assert data["logger"] == "test_logger"
        assert data["message"] == "Test message"
        assert data["line"] == 10
        assert "timestamp" in data

    def test_extra_fields_and_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            exc_info = sys.exc_info()
        record = logging.LogRecord("t", logging.ERROR, "t.py", 1, "failed", (), exc_info)
        record.operation = "save"
        data = json.loads(StructuredLogFormatter().format(record))
        assert data["operation"] == "save"
        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad value"


class TestLogStructuredError:
    def test_passes_category_and_context(self, mocker):
        mock_logger = mocker.patch("notebook_mcp.logger_config.error_logger")
        log_structured_error(
            ErrorCategory.WARNING,
            "cell missing",
            context={"notebook_path": "/nb.ipynb"},
            operation="edit_cell",
        )
        args, kwargs = mock_logger.log.call_args
        assert args == (logging.WARNING, "cell missing")
        assert kwargs["exc_info"] is False
        assert kwargs["extra"] == {
            "error_category": "WARNING",
            "operation": "edit_cell",
            "notebook_path": "/nb.ipynb",
        }


class TestSafeOperation:
    def test_success(self):
        assert safe_operation("double", lambda x: x * 2, 4) == (True, 8, None)

    def test_failure(self, mocker):
        mock_log = mocker.patch("notebook_mcp.logger_config.log_structured_error")

        def _fail():
            raise RuntimeError("nope")

        success, result, error = safe_operation("fail", _fail, error_category=ErrorCategory.WARNING)

        assert success is False
        assert result is None
        assert isinstance(error, RuntimeError)
        assert mock_log.call_args.kwargs["category"] is ErrorCategory.WARNING


class TestLogMCPCall:
    def test_sync_tool(self, mocker):
        mock_logger = mocker.patch("notebook_mcp.logger_config.mcp_call_logger")

        @log_mcp_call
        def tool(a, b=2):
            return a + b

        assert tool(1, b=3) == 4
        assert tool.__name__ == "tool"
        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert messages[0].startswith("Calling tool: tool")
        assert messages[1] == "Tool tool returned: 4"

    async def test_async_tool(self, mocker):
        mocker.patch("notebook_mcp.logger_config.mcp_call_logger")

        @log_mcp_call
        async def tool():
            return "done"

        assert await tool() == "done"

    def test_exception_is_logged_and_reraised(self, mocker):
        mocker.patch("notebook_mcp.logger_config.mcp_call_logger")
        mock_structured = mocker.patch("notebook_mcp.logger_config.log_structured_error")

        @log_mcp_call
        def tool():
            raise KeyError("boom")

        with pytest.raises(KeyError):
            tool()
        assert mock_structured.call_args.kwargs["function"] == "tool"

    def test_metrics_are_recorded_for_every_call(self, mocker):
        mocker.patch("notebook_mcp.logger_config.mcp_call_logger")
        mocker.patch("notebook_mcp.logger_config.log_structured_error")
        mock_start = mocker.patch("notebook_mcp.logger_config.record_tool_call_start", return_value=12.5)
        mock_success = mocker.patch("notebook_mcp.logger_config.record_tool_call_success")
        mock_error = mocker.patch("notebook_mcp.logger_config.record_tool_call_error")

        @log_mcp_call
        def tool(fail=False):
            if fail:
                raise ValueError("bad")
            return "ok"

        tool()
        with pytest.raises(ValueError):
            tool(fail=True)

        assert mock_start.call_count == 2
        mock_success.assert_called_once_with("tool", 12.5, len(repr("ok")))
        assert mock_error.call_args.args[:2] == ("tool", 12.5)
