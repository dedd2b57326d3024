"""Tests for the console log formatters."""

import logging

from reach_mcp.utils.console import COLORS, ColorfulFormatter, ProbeLogFormatter


def _record(name: str, msg: str, *args: object, level: int = logging.INFO) -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, msg, args, None)
    record.created = 0.0
    record.msecs = 0.0
    return record


def test_plain_format_strips_package_prefix() -> None:
    formatter = ColorfulFormatter(use_colors=False, timezone="UTC")

    line = formatter.format(_record("reach_mcp.services.prober", "Probing %d target(s)", 3))

    assert line.startswith("00:00:00.000 01/01 | INFO     | services.prober")
    assert line.endswith("| Probing 3 target(s)")
    assert "\033[" not in line


def test_unknown_timezone_falls_back_to_utc() -> None:
    formatter = ColorfulFormatter(use_colors=False, timezone="Mars/Olympus_Mons")

    assert str(formatter.zone) == "UTC"


def test_timezone_is_applied() -> None:
    formatter = ColorfulFormatter(use_colors=False, timezone="Asia/Tokyo")

    assert formatter.format(_record("reach_mcp.server", "x")).startswith("09:00:00.000 01/01")


def test_colors_highlight_endpoints_and_durations() -> None:
    formatter = ColorfulFormatter(use_colors=True, timezone="UTC")

    line = formatter.format(_record("reach_mcp.services.checks", "dc01:5985 took 12.5ms"))

    assert f"{COLORS['bright_magenta']}dc01:5985{COLORS['reset']}" in line
    assert f"{COLORS['bright_yellow']}12.5ms{COLORS['reset']}" in line


def test_probe_formatter_marks_events() -> None:
    formatter = ProbeLogFormatter(use_colors=True, timezone="UTC")

    cancelled = formatter.format(_record("reach_mcp.services.prober", "2 target(s) cancelled"))
    failed = formatter.format(_record("reach_mcp.server", "probe failed", level=logging.ERROR))
    plain = formatter.format(_record("reach_mcp.server", "Loaded config"))

    assert cancelled.startswith(f"{COLORS['bright_yellow']}!{COLORS['reset']}")
    assert failed.startswith(f"{COLORS['bright_red']}!!{COLORS['reset']}")
    assert plain.startswith("    ")


def test_probe_formatter_without_colors_adds_nothing() -> None:
    formatter = ProbeLogFormatter(use_colors=False, timezone="UTC")

    assert formatter.format(_record("reach_mcp.server", "Reach MCP server starting up")).startswith(
        "00:00:00"
    )
