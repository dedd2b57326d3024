"""MCP tools for Reach MCP."""

from reach_mcp.tools.probe import probe, ssh_ready, winrm_ready

__all__ = ["probe", "ssh_ready", "winrm_ready"]
