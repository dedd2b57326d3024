"""Individual reachability checks.

Every check bounds its blocking work by the per-check timeout and reports
failure as data. None of them raise for network conditions or malformed names.
"""

import asyncio
import logging
import socket

from reach_mcp.utils.ping import NO_REPLY, icmp_echo

logger = logging.getLogger(__name__)

TCP_TIMEOUT_NOTE = "TCP connect timed out"
ICMP_NO_REPLY_NOTE = "ICMP no reply"


def describe_error(exc: BaseException) -> str:
    """Return a short human readable cause for an exception."""
    if isinstance(exc, socket.gaierror) and len(exc.args) > 1:
        return str(exc.args[1])
    if isinstance(exc, TimeoutError):
        return "timed out"
    return str(exc) or type(exc).__name__


async def dns_check(host: str, timeout: float) -> tuple[bool, list[str], str | None]:
    """Resolve host with the system resolver.

    Args:
        host: Host name or address literal.
        timeout: Seconds to wait for the resolver.

    Returns:
        Tuple of (resolved, unique addresses in first-seen order, failure note).
    """
    try:
        infos = await asyncio.wait_for(
            asyncio.to_thread(
                socket.getaddrinfo, host, None, type=socket.SOCK_STREAM
            ),
            timeout=timeout,
        )
    # Malformed labels fail IDNA encoding with UnicodeError, a ValueError
    except (TimeoutError, OSError, ValueError) as e:
        cause = describe_error(e)
        logger.debug("DNS resolution of %s failed: %s", host, cause)
        return False, [], f"DNS resolution failed: {cause}"

    addresses = list(dict.fromkeys(str(info[4][0]) for info in infos))
    if not addresses:
        return False, [], "DNS resolution failed: no addresses returned"

    logger.debug("Resolved %s -> %s", host, ", ".join(addresses))
    return True, addresses, None


async def icmp_check(host: str, timeout: float) -> tuple[bool, str | None]:
    """Send a single ICMP echo request to host.

    Returns:
        Tuple of (reachable, failure note). "ICMP no reply" when the echo went
        unanswered, "ICMP check failed: <cause>" when the check itself failed.
    """
    if host.startswith("-"):
        return False, "ICMP check failed: host may not start with '-'"

    try:
        replied, cause = await icmp_echo(host, timeout)
    except OSError as e:
        logger.debug("Cannot run ping for %s: %s", host, e)
        return False, f"ICMP check failed: {describe_error(e)}"

    if replied:
        return True, None
    if cause == NO_REPLY:
        return False, ICMP_NO_REPLY_NOTE
    return False, f"ICMP check failed: {cause}"


async def tcp_check(host: str, port: int, timeout: float) -> tuple[bool, str | None]:
    """Attempt a TCP connection to host:port.

    The connection is always closed again. Errors during close are logged
    at DEBUG level and never raised.

    Returns:
        Tuple of (open, failure note).
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except TimeoutError:
        logger.debug("TCP connect to %s:%d timed out after %.1fs", host, port, timeout)
        return False, TCP_TIMEOUT_NOTE
    except (OSError, ValueError) as e:
        logger.debug("TCP connect to %s:%d failed: %s", host, port, e)
        return False, f"TCP connect failed: {describe_error(e)}"

    try:
        writer.close()
        await writer.wait_closed()
    except Exception as e:
        logger.debug("Error closing connection to %s:%d: %s", host, port, e)

    return True, None
