"""MCP resources for Reach MCP."""

from reach_mcp.resources.targets import format_status_report, target_status_resource

__all__ = ["format_status_report", "target_status_resource"]
