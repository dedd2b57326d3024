"""Status resource for the configured target list."""

from collections.abc import Sequence

from reach_mcp.models import CheckSpec, ProbeResult
from reach_mcp.services import get_config, get_prober


def _flag(value: bool | None, yes: str, no: str) -> str:
    if value is None:
        return "-"
    return yes if value else no


def format_status_report(results: Sequence[ProbeResult], spec: CheckSpec) -> str:
    """Render probe results as a plain text report.

    Args:
        results: Probe results in target order.
        spec: The checks that produced them.

    Returns:
        Multi-line report with one block per target and a summary line.
    """
    checks = [
        name
        for name, enabled in (
            ("dns", spec.dns),
            ("icmp", spec.icmp),
            (f"tcp/{spec.tcp_port}", spec.tcp_port is not None),
        )
        if enabled
    ]
    lines = [
        "Target Status",
        "=" * 40,
        f"Checks: {', '.join(checks) or 'none'} (timeout {spec.timeout:g}s)",
        "",
    ]

    clean = 0
    for r in results:
        ok = not r.notes
        clean += ok
        status_icon = "✓" if ok else "✗"
        lines.append(f"[{status_icon}] {r.target or '(blank)'}")
        if r.dns_resolved is not None:
            addresses = ", ".join(r.dns_addresses) or "no addresses"
            lines.append(f"    DNS:   {_flag(r.dns_resolved, 'resolved', 'failed')} ({addresses})")
        if r.icmp_reachable is not None:
            lines.append(f"    ICMP:  {_flag(r.icmp_reachable, 'reply', 'no reply')}")
        if r.tcp_port_open is not None:
            lines.append(f"    TCP:   {r.tcp_port} {_flag(r.tcp_port_open, 'open', 'closed')}")
        for note in r.notes:
            lines.append(f"    Note:  {note}")
        lines.append("")

    lines.append(f"--- {clean}/{len(results)} targets passed all checks ---")
    return "\n".join(lines)


async def target_status_resource() -> str:
    """Probe the configured targets and report their status.

    Targets come from REACH_TARGETS_FILE. Checks come from the REACH_DEFAULT_*
    settings.
    """
    config = get_config()
    targets = config.get_targets()

    if not targets:
        return "No targets configured. Set REACH_TARGETS_FILE to a file with one host per line."

    spec = config.default_spec()
    results = await get_prober().probe(targets, spec, deadline=config.deadline)
    return format_status_report(results, spec)
