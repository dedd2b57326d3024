"""Utilities for Reach MCP."""

from reach_mcp.utils.console import ColorfulFormatter, ProbeLogFormatter
from reach_mcp.utils.ping import NO_REPLY, build_ping_command, icmp_echo

__all__ = [
    "NO_REPLY",
    "ColorfulFormatter",
    "ProbeLogFormatter",
    "build_ping_command",
    "icmp_echo",
]
