"""Services for Reach MCP."""

from reach_mcp.services.checks import dns_check, icmp_check, tcp_check
from reach_mcp.services.handshakes import HandshakeError, WinRMIdentify, ssh_host_key
from reach_mcp.services.prober import BatchProber
from reach_mcp.services.state import (
    get_config,
    get_prober,
    reset_state,
    set_config,
    set_prober,
)
from reach_mcp.services.validation import ProbeInputError, is_valid_target

__all__ = [
    "BatchProber",
    "HandshakeError",
    "ProbeInputError",
    "WinRMIdentify",
    "dns_check",
    "get_config",
    "get_prober",
    "icmp_check",
    "is_valid_target",
    "reset_state",
    "set_config",
    "set_prober",
    "ssh_host_key",
    "tcp_check",
]
