"""Colorful console logging formatter."""

import logging
import os
import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "reach_mcp.server": COLORS["bright_cyan"],
    "reach_mcp.services.prober": COLORS["bright_magenta"],
    "reach_mcp.services.checks": COLORS["magenta"],
    "reach_mcp.services.handshakes": COLORS["bright_blue"],
    "reach_mcp.tools": COLORS["blue"],
    "reach_mcp.resources": COLORS["cyan"],
    "reach_mcp.middleware": COLORS["yellow"],
    "reach_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

_DURATION_RE = re.compile(r"(\d+\.?\d*m?s)\b")
_ENDPOINT_RE = re.compile(r"([\w\.\-]+:\d{1,5})\b")
_TARGET_COUNT_RE = re.compile(r"(\d+ target\(s\))")


def _load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with zoned timestamps and component highlighting."""

    def __init__(self, use_colors: bool = True, timezone: str | None = None) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
            timezone: IANA zone for timestamps, defaults to REACH_LOG_TIMEZONE or UTC.
        """
        super().__init__()
        self.use_colors = use_colors
        self.zone = _load_zone(timezone or os.getenv("REACH_LOG_TIMEZONE", "UTC"))

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name/component."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=self.zone)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("reach_mcp."):
            name = name[len("reach_mcp.") :]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors and timestamp."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight durations, host:port endpoints and batch sizes."""
        if not self.use_colors:
            return message

        message = _DURATION_RE.sub(
            f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
        )
        message = _ENDPOINT_RE.sub(
            f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
        )
        message = _TARGET_COUNT_RE.sub(
            f"{COLORS['cyan']}\\1{COLORS['reset']}", message
        )
        return message


class ProbeLogFormatter(ColorfulFormatter):
    """Formatter that prefixes lifecycle and outcome events with a marker."""

    def format(self, record: logging.LogRecord) -> str:
        """Format with a leading event marker."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()
        if "starting" in message or "ready" in message:
            return f"{COLORS['bright_green']}>>>{COLORS['reset']} {base}"
        elif "shutting down" in message or "shutdown" in message:
            return f"{COLORS['bright_red']}<<<{COLORS['reset']} {base}"
        elif "cancel" in message or "deadline" in message:
            return f"{COLORS['bright_yellow']}!{COLORS['reset']}   {base}"
        elif "error" in message or "failed" in message:
            return f"{COLORS['bright_red']}!!{COLORS['reset']}  {base}"
        elif "slow" in message:
            return f"{COLORS['bright_yellow']}!{COLORS['reset']}   {base}"
        return f"    {base}"
