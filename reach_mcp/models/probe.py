"""Probe request and result data models."""

from dataclasses import asdict, dataclass, field
from typing import Any

INVALID_TARGET_NOTE = "invalid target"
CANCELLED_NOTE = "cancelled"


@dataclass(frozen=True)
class CheckSpec:
    """Checks to run for every target of a batch call."""

    dns: bool = False
    icmp: bool = False
    tcp_port: int | None = None
    timeout: float = 3.0  # seconds, per check


@dataclass
class ProbeResult:
    """Outcome of probing one target.

    A check field stays None when the check was not requested (or never
    completed). Once attempted it is True or False.
    """

    target: str
    dns_resolved: bool | None = None
    dns_addresses: list[str] = field(default_factory=list)
    icmp_reachable: bool | None = None
    tcp_port: int | None = None
    tcp_port_open: bool | None = None
    notes: list[str] = field(default_factory=list)

    @property
    def cancelled(self) -> bool:
        """Whether the batch was cancelled before this target finished."""
        return CANCELLED_NOTE in self.notes

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe dict of all fields."""
        return asdict(self)
