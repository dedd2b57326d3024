"""Tests for logging middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from reach_mcp.middleware.logging import LoggingMiddleware


@pytest.fixture
def mock_tool_context() -> MagicMock:
    """Create a mock middleware context for tool calls."""
    context = MagicMock()
    context.method = "tools/call"
    context.message = MagicMock()
    context.message.name = "probe"
    context.message.arguments = {"targets": ["dc01", "dc02"], "tcp_port": 5985}
    return context


@pytest.fixture
def mock_resource_context() -> MagicMock:
    """Create a mock middleware context for resource reads."""
    context = MagicMock()
    context.method = "resources/read"
    context.message = MagicMock()
    context.message.uri = "targets://status"
    return context


@pytest.fixture
def mock_generic_context() -> MagicMock:
    """Create a mock middleware context for generic messages."""
    context = MagicMock()
    context.method = "tools/list"
    context.message = MagicMock()
    return context


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_call(mock_tool_context: MagicMock) -> None:
    """Tool calls are logged with name, arguments, and completion."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value=[{"target": "dc01"}, {"target": "dc02"}])

    await middleware.on_call_tool(mock_tool_context, call_next)

    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> TOOL" in all_info_calls
    assert "probe" in all_info_calls
    assert "tcp_port=5985" in all_info_calls
    assert "<<< TOOL" in all_log_calls
    assert "2 items" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_summarizes_long_target_lists(
    mock_tool_context: MagicMock,
) -> None:
    """A long target list is logged as a count."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    mock_tool_context.message.arguments = {"targets": [f"web{i}" for i in range(40)]}

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value=[]))

    all_info_calls = str(mock_logger.info.call_args_list)
    assert "targets=<40 items>" in all_info_calls
    assert "web39" not in all_info_calls


@pytest.mark.asyncio
async def test_logging_middleware_summarizes_structured_result(
    mock_tool_context: MagicMock,
) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    result = MagicMock()
    result.structured_content = {"result": [{"target": "a"}, {"target": "b"}, {"target": "c"}]}

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value=result))

    assert "3 result(s)" in str(mock_logger.log.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_logs_resource_read(
    mock_resource_context: MagicMock,
) -> None:
    """Resource reads are logged with URI."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="Target Status\n...")

    await middleware.on_read_resource(mock_resource_context, call_next)

    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> RESOURCE" in all_info_calls
    assert "targets://status" in all_info_calls
    assert "<<< RESOURCE" in all_log_calls
    assert "2 lines" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_truncates_long_payloads(
    mock_tool_context: MagicMock,
) -> None:
    """Payloads longer than max_payload_length are truncated."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(
        logger=mock_logger,
        include_payloads=True,
        max_payload_length=20,
    )
    mock_tool_context.message.arguments = {"targets": ["x" * 100]}

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value="ok"))

    all_calls = str(mock_logger.debug.call_args_list)
    assert "[truncated]" in all_calls
    assert "x" * 100 not in all_calls


@pytest.mark.asyncio
async def test_logging_middleware_slow_call_is_warning(
    mock_tool_context: MagicMock,
) -> None:
    """Calls over the slow threshold complete at WARNING level."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, slow_threshold_ms=0)

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value=[]))

    level = mock_logger.log.call_args.args[0]
    assert level == 30
    assert "SLOW!" in str(mock_logger.log.call_args)


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_errors(mock_tool_context: MagicMock) -> None:
    """Tool errors are logged at error level and re-raised."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=ValueError("test error"))

    with pytest.raises(ValueError):
        await middleware.on_call_tool(mock_tool_context, call_next)

    mock_logger.error.assert_called_once()
    error_call = str(mock_logger.error.call_args)
    assert "!!! TOOL" in error_call
    assert "ValueError" in error_call


@pytest.mark.asyncio
async def test_logging_middleware_logs_resource_errors(
    mock_resource_context: MagicMock,
) -> None:
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    with pytest.raises(OSError):
        await middleware.on_read_resource(
            mock_resource_context, AsyncMock(side_effect=OSError("boom"))
        )

    assert "!!! RESOURCE" in str(mock_logger.error.call_args)


@pytest.mark.asyncio
async def test_logging_middleware_skips_handled_methods_in_on_message(
    mock_tool_context: MagicMock,
) -> None:
    """on_message passes tools/call through without logging."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    result = await middleware.on_message(mock_tool_context, AsyncMock(return_value="result"))

    assert result == "result"
    mock_logger.info.assert_not_called()
    mock_logger.debug.assert_not_called()


@pytest.mark.asyncio
async def test_logging_middleware_logs_generic_messages(
    mock_generic_context: MagicMock,
) -> None:
    """Other MCP messages are logged at DEBUG."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)

    await middleware.on_message(mock_generic_context, AsyncMock(return_value=[]))

    all_debug_calls = str(mock_logger.debug.call_args_list)
    assert ">>> MCP" in all_debug_calls
    assert "tools/list" in all_debug_calls
