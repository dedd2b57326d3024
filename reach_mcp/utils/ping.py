"""ICMP echo via the platform ping binary.

Raw ICMP sockets need elevated privileges on most systems, while the
``ping`` binary is installed setuid or with the needed capability. A single
echo request is sent and the exit status is reduced to a boolean.
"""

import asyncio
import logging
import math
import sys

logger = logging.getLogger(__name__)

# Returned as the failure cause when ping ran cleanly but got no echo reply
NO_REPLY = "no reply"


def build_ping_command(
    host: str,
    timeout: float,
    platform: str | None = None,
) -> list[str]:
    """Build a single-echo ping command line for the platform.

    Args:
        host: Host name or address to ping.
        timeout: Seconds to wait for the reply.
        platform: sys.platform value, defaults to the running platform.

    Returns:
        Argument list for create_subprocess_exec.
    """
    platform = platform or sys.platform
    if platform.startswith("win"):
        wait_ms = max(1, int(timeout * 1000))
        return ["ping", "-n", "1", "-w", str(wait_ms), host]

    if platform == "darwin" or "bsd" in platform:
        # -t takes whole seconds only, icmp_echo still kills ping at timeout
        return ["ping", "-c", "1", "-t", str(max(1, math.ceil(timeout))), host]
    return ["ping", "-c", "1", "-W", f"{max(timeout, 0.001):g}", host]


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill the ping process if still running and wait for it."""
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    try:
        await proc.wait()
    except Exception as e:
        logger.debug("Failed to reap ping process %s: %s", proc.pid, e)


async def icmp_echo(host: str, timeout: float) -> tuple[bool, str | None]:
    """Send one ICMP echo request to host.

    A False result does not prove the host is down. Firewalls commonly drop
    echo requests, so it only means no reply arrived within the timeout.

    Args:
        host: Host name or address to ping.
        timeout: Seconds to wait for the reply.

    Returns:
        Tuple of (replied, cause). cause is None on success, NO_REPLY when
        ping ran but got no answer, otherwise a description of the failure.

    Raises:
        OSError: If the ping binary cannot be started.
    """
    cmd = build_ping_command(host, timeout)
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        _, stderr = await asyncio.wait_for(
            proc.communicate(),
            timeout=timeout,
        )
    except TimeoutError:
        logger.debug("ping %s still running after %.2fs, killing", host, timeout)
        return False, NO_REPLY
    finally:
        await _reap(proc)

    if proc.returncode == 0:
        return True, None
    if proc.returncode == 1:
        return False, NO_REPLY

    message = (stderr or b"").decode(errors="replace").strip().splitlines()
    if message:
        return False, message[0]
    return False, f"ping exited with status {proc.returncode}"
