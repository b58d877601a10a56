"""MCP Server for Jupyter Notebook Editing.

This module provides a FastMCP-based MCP server for editing ``.ipynb`` files.
It exposes tools for listing, inserting, deleting, moving, converting and
editing cells, for applying batches of cell operations, and for executing
code cells on a Jupyter kernel.
"""

import argparse
import sys

import anyio
from dotenv import load_dotenv
from mcp.server import FastMCP
from starlette.requests import Request
from starlette.responses import Response

from .config import get_settings
from .execution import KernelSessionManager
from .metrics_config import METRICS_ENABLED
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import shutdown_metrics
from .tools import register_batch_tools
from .tools import register_cell_tools
from .tools import register_editor_tools
from .tools import register_execution_tools

# Load environment variables from .env file
load_dotenv()

kernel_sessions = KernelSessionManager()

mcp_server = FastMCP(
    name="NotebookEditingTools",
    instructions="Tools for reading, editing and executing cells of Jupyter notebooks (.ipynb files).",
)

register_cell_tools(mcp_server)
register_batch_tools(mcp_server)
register_execution_tools(mcp_server, kernel_sessions)
register_editor_tools(mcp_server)


@mcp_server.custom_route("/health", methods=["GET"], name="health")
async def health_check(request: Request) -> Response:
    """Health check endpoint to verify server readiness."""
    return Response(status_code=200)


@mcp_server.custom_route("/metrics", methods=["GET"], name="metrics")
async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint for monitoring MCP tool usage."""
    metrics_data, content_type = get_metrics_export()
    return Response(content=metrics_data, status_code=200, media_type=content_type)


async def _serve(transport: str) -> None:
    """Serve until the transport closes, then stop every kernel.

    FastMCP's lifespan runs once per SSE connection; kernels live for the
    whole process.
    """
    try:
        if transport == "stdio":
            await mcp_server.run_stdio_async()
        else:
            await mcp_server.run_sse_async()
    finally:
        await kernel_sessions.shutdown_all()


def main():
    """Run the main entry point for the server with argument parsing."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Notebook MCP Server")
    parser.add_argument(
        "transport",
        choices=["sse", "stdio"],
        default="stdio",
        nargs="?",
        help="Transport: 'sse' for HTTP SSE or 'stdio' for standard I/O (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default=settings.sse_host,
        help=f"Host to bind to for SSE transport (default: {settings.sse_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.sse_port,
        help=f"Port to bind to for SSE transport (default: {settings.sse_port})",
    )

    args = parser.parse_args()

    # stdout carries the protocol in stdio mode
    print(f"Notebook tool server starting. Tools exposed by '{mcp_server.name}'", file=sys.stderr)
    print(f"Default kernel: {settings.kernel_name}", file=sys.stderr)
    print(f"Metrics: {'enabled' if METRICS_ENABLED else 'disabled'}", file=sys.stderr)
    ensure_metrics_initialized()

    try:
        if args.transport == "stdio":
            print("MCP server running with stdio transport. Waiting for client connection...", file=sys.stderr)
            anyio.run(_serve, "stdio")
        else:
            print(f"MCP server running with HTTP SSE transport on {args.host}:{args.port}", file=sys.stderr)
            print(f"SSE endpoint: http://{args.host}:{args.port}/sse", file=sys.stderr)
            print(f"Health endpoint: http://{args.host}:{args.port}/health", file=sys.stderr)
            print(f"Metrics endpoint: http://{args.host}:{args.port}/metrics", file=sys.stderr)
            mcp_server.settings.host = args.host
            mcp_server.settings.port = args.port
            anyio.run(_serve, "sse")
    finally:
        shutdown_metrics()


if __name__ == "__main__":
    main()
