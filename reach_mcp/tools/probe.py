"""Probe tools exposing the batch prober over MCP."""

import logging
from typing import Any

from fastmcp.exceptions import ToolError

from reach_mcp.models import CheckSpec
from reach_mcp.services import ProbeInputError, get_config, get_prober

logger = logging.getLogger(__name__)


def _spec(
    dns: bool,
    icmp: bool,
    tcp_port: int | None,
    timeout: float | None,
) -> CheckSpec:
    config = get_config()
    return CheckSpec(
        dns=dns,
        icmp=icmp,
        tcp_port=tcp_port,
        timeout=config.timeout if timeout is None else timeout,
    )


def _deadline(deadline: float | None) -> float | None:
    return get_config().deadline if deadline is None else deadline


async def probe(
    targets: list[str],
    dns: bool = False,
    icmp: bool = False,
    tcp_port: int | None = None,
    timeout: float | None = None,
    deadline: float | None = None,
) -> list[dict[str, Any]]:
    """Probe hosts for reachability with DNS, ICMP and TCP port checks.

    Args:
        targets: Host names, FQDNs or IP addresses. Each is probed
            independently, duplicates included.
        dns: Resolve each target.
        icmp: Send one ICMP echo request. A failure does not prove the host
            is down, ICMP is often filtered.
        tcp_port: Port to attempt a TCP connection on (1-65535).
        timeout: Seconds allowed per check (default from REACH_TIMEOUT).
        deadline: Overall seconds for the batch. Unfinished targets are
            marked "cancelled".

    Examples:
        probe(["dc01", "10.0.0.5"], dns=True, tcp_port=5985)
        probe(["web1", "web2"], icmp=True, timeout=1)

    Returns:
        One result per target in input order. Check fields are null when the
        check was not requested.
    """
    spec = _spec(dns, icmp, tcp_port, timeout)
    try:
        results = await get_prober().probe(targets, spec, deadline=_deadline(deadline))
    except ProbeInputError as e:
        raise ToolError(str(e)) from e
    return [r.to_dict() for r in results]


async def winrm_ready(
    targets: list[str],
    https: bool | None = None,
    port: int | None = None,
    timeout: float | None = None,
    dns: bool = False,
    icmp: bool = False,
    port_diagnostic: bool = True,
    deadline: float | None = None,
) -> list[dict[str, Any]]:
    """Check whether WinRM answers a WS-Management Identify request.

    Use protocol_ok to decide whether a host is usable. tcp_port_open is only
    a diagnostic: the port can be open while WinRM is broken, or filtered
    while the service itself is fine.

    Args:
        targets: Host names, FQDNs or IP addresses.
        https: Use HTTPS on 5986 instead of HTTP on 5985 (default from
            REACH_WINRM_HTTPS).
        port: Override the WinRM port.
        timeout: Seconds allowed per check.
        dns: Also resolve each target.
        icmp: Also send one ICMP echo request.
        port_diagnostic: Also run a TCP connect check on the WinRM port.
        deadline: Overall seconds for the batch.

    Returns:
        One readiness result per target in input order.
    """
    config = get_config()
    spec = _spec(dns, icmp, None, timeout)
    try:
        results = await get_prober().winrm_ready(
            targets,
            https=config.winrm_https if https is None else https,
            port=port,
            spec=spec,
            credentials=config.winrm_credentials,
            verify_tls=config.winrm_verify_tls,
            port_diagnostic=port_diagnostic,
            deadline=_deadline(deadline),
        )
    except ProbeInputError as e:
        raise ToolError(str(e)) from e
    return [r.to_dict() for r in results]


async def ssh_ready(
    targets: list[str],
    port: int = 22,
    timeout: float | None = None,
    dns: bool = False,
    icmp: bool = False,
    port_diagnostic: bool = True,
    deadline: float | None = None,
) -> list[dict[str, Any]]:
    """Check whether SSH completes key exchange, without logging in.

    Args:
        targets: Host names, FQDNs or IP addresses.
        port: SSH port.
        timeout: Seconds allowed per check.
        dns: Also resolve each target.
        icmp: Also send one ICMP echo request.
        port_diagnostic: Also run a TCP connect check on the SSH port.
        deadline: Overall seconds for the batch.

    Returns:
        One readiness result per target in input order, with the host key
        fingerprint as protocol_detail.
    """
    spec = _spec(dns, icmp, None, timeout)
    try:
        results = await get_prober().ssh_ready(
            targets,
            port=port,
            spec=spec,
            port_diagnostic=port_diagnostic,
            deadline=_deadline(deadline),
        )
    except ProbeInputError as e:
        raise ToolError(str(e)) from e
    return [r.to_dict() for r in results]
