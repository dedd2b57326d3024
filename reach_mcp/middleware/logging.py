"""Logging middleware for request/response tracking."""

import json
import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from reach_mcp.middleware.base import ReachMiddleware

_DEDICATED_METHODS = ("tools/call", "resources/read")


class LoggingMiddleware(ReachMiddleware):
    """Logs tool calls and resource reads with timing.

    Tool arguments are summarized, so a call with a long target list logs the
    number of targets instead of every host name.

    Example:
        >>> middleware = LoggingMiddleware(slow_threshold_ms=5000)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Whether to log request/response payloads.
            max_payload_length: Maximum payload length before truncation.
            slow_threshold_ms: Threshold in ms for slow request warnings.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _truncate(self, data: Any) -> str:
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError):
            text = str(data)

        if len(text) > self.max_payload_length:
            return text[: self.max_payload_length] + "... [truncated]"
        return text

    def _format_args(self, args: dict[str, Any] | None) -> str:
        if not args:
            return "()"
        parts = []
        for key, value in args.items():
            if isinstance(value, (list, tuple)) and len(value) > 3:
                parts.append(f"{key}=<{len(value)} items>")
                continue
            if isinstance(value, str) and len(value) > 50:
                value = value[:50] + "..."
            parts.append(f"{key}={value!r}")
        return f"({', '.join(parts)})"

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    def _log_done(self, label: str, name: str, result: Any, start: float) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        self.logger.log(
            level,
            "<<< %s: %s -> %s [%s]",
            label,
            name,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )

    def _log_failed(self, label: str, name: str, exc: Exception, start: float) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.error(
            "!!! %s: %s -> %s: %s [%s]",
            label,
            name,
            type(exc).__name__,
            exc,
            self._format_duration(duration_ms),
        )

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log tool calls with name, arguments, and timing."""
        start = time.perf_counter()
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))
        if self.include_payloads and args:
            self.logger.debug("    Args: %s", self._truncate(args))

        try:
            result = await call_next(context)
        except Exception as e:
            self._log_failed("TOOL", tool_name, e, start)
            raise

        self._log_done("TOOL", tool_name, result, start)
        if self.include_payloads and result is not None:
            self.logger.debug("    Result: %s", self._truncate(result))
        return result

    async def on_read_resource(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log resource reads with URI and timing."""
        start = time.perf_counter()
        uri = str(getattr(context.message, "uri", "unknown"))

        self.logger.info(">>> RESOURCE: %s", uri)
        try:
            result = await call_next(context)
        except Exception as e:
            self._log_failed("RESOURCE", uri, e, start)
            raise

        self._log_done("RESOURCE", uri, result, start)
        return result

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log other MCP messages at DEBUG level."""
        method = context.method
        if method in _DEDICATED_METHODS:
            return await call_next(context)

        start = time.perf_counter()
        self.logger.debug(">>> MCP: %s", method)
        try:
            result = await call_next(context)
        except Exception as e:
            self._log_failed("MCP", str(method), e, start)
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.debug("<<< MCP: %s [%s]", method, self._format_duration(duration_ms))
        return result

    def _summarize_result(self, result: Any) -> str:
        """Create a brief summary of a result for logging."""
        if result is None:
            return "null"

        structured = getattr(result, "structured_content", None)
        if isinstance(structured, dict) and isinstance(structured.get("result"), list):
            return f"{len(structured['result'])} result(s)"

        if isinstance(result, str):
            lines = result.count("\n") + 1
            if lines > 1:
                return f"{len(result)} chars, {lines} lines"
            return f"{len(result)} chars"

        if isinstance(result, (list, tuple)):
            return f"{len(result)} items"

        if isinstance(result, dict):
            return f"{len(result)} keys"

        content = getattr(result, "content", None)
        if isinstance(content, (list, tuple)):
            return f"{len(content)} content item(s)"

        return type(result).__name__
