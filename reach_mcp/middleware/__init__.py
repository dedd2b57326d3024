"""Reach MCP middleware components."""

from reach_mcp.middleware.base import ReachMiddleware
from reach_mcp.middleware.errors import ErrorHandlingMiddleware
from reach_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "ReachMiddleware",
]
