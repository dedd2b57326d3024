"""Reach MCP: concurrent reachability probing for remote admin endpoints."""

from reach_mcp.models import CheckSpec, ProbeResult, ProtocolReadiness
from reach_mcp.services import BatchProber, HandshakeError, ProbeInputError

__version__ = "0.1.0"

__all__ = [
    "BatchProber",
    "CheckSpec",
    "HandshakeError",
    "ProbeInputError",
    "ProbeResult",
    "ProtocolReadiness",
]
