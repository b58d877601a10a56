import functools
import inspect
import json
import logging
from datetime import datetime
from datetime import timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import Any

from .config import get_settings
from .metrics_config import record_tool_call_error
from .metrics_config import record_tool_call_start
from .metrics_config import record_tool_call_success

_settings = get_settings()
_log_dir = _settings.log_path

# --- Logging Setup ---
mcp_call_logger = logging.getLogger("mcp_call_logger")
mcp_call_logger.setLevel(_settings.log_level)

# maxBytes: 10MB per file, backupCount: 5 files (total ~50MB)
file_handler = RotatingFileHandler(_log_dir / "mcp_calls.log", maxBytes=10 * 1024 * 1024, backupCount=5)
formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
file_handler.setFormatter(formatter)
mcp_call_logger.addHandler(file_handler)
mcp_call_logger.propagate = False


class ErrorCategory(Enum):
    """Severity categories for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_RESERVED_RECORD_FIELDS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info).splitlines(),
            }
        for key, value in vars(record).items():
            if key not in _RESERVED_RECORD_FIELDS and key not in log_data:
                log_data[key] = value
        return json.dumps(log_data, default=str)


error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
error_file_handler = RotatingFileHandler(_log_dir / "errors.log", maxBytes=10 * 1024 * 1024, backupCount=5)
if _settings.structured_logging:
    error_file_handler.setFormatter(StructuredLogFormatter())
else:
    error_file_handler.setFormatter(formatter)
error_logger.addHandler(error_file_handler)
error_logger.propagate = False

_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    operation: str | None = None,
    **kwargs,
):
    """Log an error with its category, operation and context as structured fields."""
    extra: dict[str, Any] = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)
    error_logger.log(_LEVELS[category], message, exc_info=exception is not None, extra=extra)


def safe_operation(
    operation_name: str,
    operation_func,
    *args,
    error_category: ErrorCategory = ErrorCategory.ERROR,
    context: dict[str, Any] | None = None,
    **kwargs,
) -> tuple[bool, Any, Exception | None]:
    """Run ``operation_func`` and report ``(success, result, error)`` instead of raising."""
    try:
        return True, operation_func(*args, **kwargs), None
    except Exception as e:
        log_structured_error(
            category=error_category,
            message=f"Operation {operation_name} failed: {e}",
            exception=e,
            context=context,
            operation=operation_name,
        )
        return False, None, e


def _describe(value: Any) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(indent=None, exclude_none=True)
    return repr(value)


def _log_call(func_name: str, args, kwargs) -> float | None:
    start_time = record_tool_call_start(func_name, args, kwargs)
    logged_args = [_describe(arg) for arg in args]
    logged_kwargs = {k: _describe(v) for k, v in kwargs.items()}
    mcp_call_logger.info(f"Calling tool: {func_name} with args={logged_args}, kwargs={logged_kwargs}")
    return start_time


def _log_result(func_name: str, start_time: float | None, result: Any):
    result_str = _describe(result)
    record_tool_call_success(func_name, start_time, len(result_str))
    mcp_call_logger.info(f"Tool {func_name} returned: {result_str}")


def _log_exception(func_name: str, start_time: float | None, e: Exception):
    record_tool_call_error(func_name, start_time, e)
    mcp_call_logger.error(f"Tool {func_name} raised exception: {e}", exc_info=True)
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=f"Tool {func_name} raised an unhandled exception",
        exception=e,
        operation="tool_execution",
        function=func_name,
    )


# --- Decorator for Logging MCP Calls with Metrics ---
def log_mcp_call(func):
    """Log arguments, results and failures of an MCP tool, sync or async."""
    func_name = getattr(func, "__name__", "unknown_function")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = _log_call(func_name, args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_exception(func_name, start_time, e)
                raise
            _log_result(func_name, start_time, result)
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = _log_call(func_name, args, kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_exception(func_name, start_time, e)
            raise
        _log_result(func_name, start_time, result)
        return result

    return wrapper
