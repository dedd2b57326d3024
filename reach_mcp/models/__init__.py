"""Data models for Reach MCP."""

from reach_mcp.models.probe import (
    CANCELLED_NOTE,
    INVALID_TARGET_NOTE,
    CheckSpec,
    ProbeResult,
)
from reach_mcp.models.readiness import ProtocolReadiness

__all__ = [
    "CANCELLED_NOTE",
    "INVALID_TARGET_NOTE",
    "CheckSpec",
    "ProbeResult",
    "ProtocolReadiness",
]
