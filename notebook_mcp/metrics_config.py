"""Notebook MCP Metrics Configuration.

Local-only tool call metrics using OpenTelemetry with a Prometheus reader.
Metrics stay disabled under pytest and CI unless explicitly enabled.
"""

from __future__ import annotations

import os
import socket
import time

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import generate_latest

from .config import get_settings

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "notebook-mcp")
SERVICE_VERSION = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


default_metrics_enabled = "false" if is_test_environment() else "true"
METRICS_ENABLED = os.getenv("MCP_METRICS_ENABLED", default_metrics_enabled).lower() == "true"

meter = None
tool_calls_counter = None
tool_duration_histogram = None
prometheus_reader = None

_active_operations: dict[str, float] = {}
_metrics_initialized = False


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service information."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "host.name": socket.gethostname(),
        }
    )


def initialize_metrics():
    """Initialize local metrics collection with a Prometheus reader."""
    global meter, tool_calls_counter, tool_duration_histogram, prometheus_reader

    if not METRICS_ENABLED:
        return

    prometheus_reader = PrometheusMetricReader()
    meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter(__name__)

    tool_calls_counter = meter.create_counter(
        name="mcp_tool_calls_total",
        description="Total number of MCP tool calls",
        unit="1",
    )
    tool_duration_histogram = meter.create_histogram(
        name="mcp_tool_duration_seconds",
        description="Duration of MCP tool calls",
        unit="s",
    )


def is_metrics_enabled() -> bool:
    """Check if metrics collection is enabled."""
    return METRICS_ENABLED and meter is not None


def record_tool_call_start(tool_name: str, args: tuple, kwargs: dict) -> float | None:
    """Record start of tool call, return start time."""
    if not is_metrics_enabled():
        return None

    start_time = time.time()
    _active_operations[f"{tool_name}_{start_time}"] = start_time
    return start_time


def _record_finish(tool_name: str, start_time: float | None, status: str):
    if tool_calls_counter:
        tool_calls_counter.add(1, {"tool_name": tool_name, "status": status, "environment": DEPLOYMENT_ENVIRONMENT})
    if start_time:
        _active_operations.pop(f"{tool_name}_{start_time}", None)
        if tool_duration_histogram:
            tool_duration_histogram.record(time.time() - start_time, {"tool_name": tool_name, "status": status})


def record_tool_call_success(tool_name: str, start_time: float | None, result_size: int = 0):
    """Record successful tool call."""
    if not is_metrics_enabled():
        return
    _record_finish(tool_name, start_time, "success")


def record_tool_call_error(tool_name: str, start_time: float | None, error: Exception):
    """Record failed tool call."""
    if not is_metrics_enabled():
        return
    _record_finish(tool_name, start_time, "error")


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus format."""
    if not is_metrics_enabled() or not prometheus_reader:
        return "# Metrics not available\n", "text/plain"
    return generate_latest().decode("utf-8"), CONTENT_TYPE_LATEST


def ensure_metrics_initialized():
    """Initialize metrics when server starts."""
    global _metrics_initialized
    if _metrics_initialized:
        return

    if METRICS_ENABLED and get_settings().enable_metrics and not is_test_environment():
        initialize_metrics()
    _metrics_initialized = True


def shutdown_metrics():
    """Shutdown metrics collection."""
    if prometheus_reader:
        prometheus_reader.shutdown()
