"""Protocol readiness result model."""

from dataclasses import dataclass

from reach_mcp.models.probe import ProbeResult


@dataclass
class ProtocolReadiness(ProbeResult):
    """Probe result extended with a protocol handshake outcome.

    The handshake is the authoritative signal. The inherited TCP fields are a
    best-effort diagnostic on the same port and never feed into protocol_ok.
    """

    protocol: str = ""
    protocol_port: int | None = None
    protocol_ok: bool | None = None
    protocol_error: str | None = None
    protocol_detail: str | None = None

    @property
    def usable(self) -> bool:
        """Whether the handshake succeeded."""
        return self.protocol_ok is True
