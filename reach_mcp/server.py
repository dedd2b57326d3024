"""Reach MCP FastMCP server.

This is a thin wrapper that wires the batch prober into an MCP server.
All probing logic lives in the services/ modules.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from reach_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from reach_mcp.resources import target_status_resource
from reach_mcp.services import get_config, get_prober
from reach_mcp.tools import probe, ssh_ready, winrm_ready
from reach_mcp.utils.console import ProbeLogFormatter

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
)


def _configure_logging() -> None:
    """Configure colorful logging for the reach_mcp package.

    Called at module load time so logging is set up however the server
    is started.
    """
    log_level = os.getenv("REACH_LOG_LEVEL", "INFO").upper()
    use_colors = os.getenv("REACH_LOG_COLORS", "true").lower() != "false"

    if not sys.stderr.isatty():
        use_colors = False

    reach_logger = logging.getLogger("reach_mcp")
    reach_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Only add handler if not already configured
    if not reach_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ProbeLogFormatter(use_colors=use_colors))
        reach_logger.addHandler(handler)
        reach_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Load configuration and the prober at startup.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with configured targets
    """
    logger.info("Reach MCP server starting up")

    config = get_config()
    prober = get_prober()
    targets = config.get_targets()
    logger.info(
        "Loaded %d target(s) (timeout=%.1fs, max_concurrency=%d)",
        len(targets),
        config.timeout,
        prober.max_concurrency,
    )
    logger.info("Reach MCP server ready to accept connections")

    try:
        yield {"targets": targets}
    finally:
        logger.info("Reach MCP server shutdown complete")


def configure_middleware(server: FastMCP) -> None:
    """Configure middleware stack for the server.

    Environment variables:
        REACH_LOG_PAYLOADS: Set to "true" to log request/response payloads
        REACH_SLOW_THRESHOLD_MS: Threshold for slow request warnings (default: 1000)
        REACH_INCLUDE_TRACEBACK: Set to "true" to include tracebacks in error logs

    Args:
        server: The FastMCP server to configure.
    """
    log_payloads = os.getenv("REACH_LOG_PAYLOADS", "").lower() == "true"
    include_traceback = os.getenv("REACH_INCLUDE_TRACEBACK", "").lower() == "true"
    try:
        slow_threshold = float(os.getenv("REACH_SLOW_THRESHOLD_MS", "1000"))
    except ValueError:
        logger.warning("Invalid REACH_SLOW_THRESHOLD_MS, using 1000")
        slow_threshold = 1000.0

    # First added = innermost
    server.add_middleware(ErrorHandlingMiddleware(include_traceback=include_traceback))
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=log_payloads,
            slow_threshold_ms=slow_threshold,
        )
    )


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware, tools and resources.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("reach_mcp", lifespan=app_lifespan)

    configure_middleware(server)

    server.tool()(probe)
    server.tool()(winrm_ready)
    server.tool()(ssh_ready)

    server.resource(
        "targets://status",
        name="target status",
        description="Reachability of the configured targets",
        mime_type="text/plain",
    )(target_status_resource)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
