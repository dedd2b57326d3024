"""Concurrent batch reachability prober.

Scheduling:
- One asyncio task per target, bounded by a semaphore (max_concurrency)
- Each task owns its result object; nothing is shared between targets
- Finished results land in a pre-sized slot list indexed by input position,
  so output order always matches input order

Cancellation:
- An overall deadline or a cancel event stops the batch
- In-flight tasks are cancelled and awaited so sockets and child processes
  are released before returning
- Unfinished targets keep the sub-checks they completed and get a
  "cancelled" note
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from reach_mcp.models import (
    CANCELLED_NOTE,
    INVALID_TARGET_NOTE,
    CheckSpec,
    ProbeResult,
    ProtocolReadiness,
)
from reach_mcp.services.checks import describe_error, dns_check, icmp_check, tcp_check
from reach_mcp.services.handshakes import (
    SSH_PORT,
    WINRM_HTTP_PORT,
    WINRM_HTTPS_PORT,
    Handshake,
    WinRMIdentify,
    ssh_host_key,
)
from reach_mcp.services.validation import (
    ProbeInputError,
    is_valid_target,
    validate_port,
    validate_spec,
    validate_timeout,
    validate_targets,
)

R = TypeVar("R", bound=ProbeResult)


class BatchProber:
    """Runs reachability checks against many targets concurrently."""

    def __init__(
        self,
        max_concurrency: int = 32,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize prober.

        Args:
            max_concurrency: Maximum number of targets probed at once (> 0)
            logger: Optional diagnostic sink. Defaults to module logger.

        Raises:
            ValueError: If max_concurrency is not positive
        """
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be > 0, got {max_concurrency}")
        self.max_concurrency = max_concurrency
        self.logger = logger or logging.getLogger(__name__)

    async def probe(
        self,
        targets: Sequence[Any],
        spec: CheckSpec | None = None,
        *,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[ProbeResult]:
        """Probe every target and return one result per target, in order.

        Args:
            targets: Host names, FQDNs or IP literals
            spec: Checks to run, defaults to CheckSpec() (no checks)
            deadline: Optional overall time limit in seconds
            cancel_event: Optional event that cancels the batch when set

        Returns:
            List of ProbeResult aligned with targets

        Raises:
            ProbeInputError: If targets, spec or deadline is malformed
        """
        targets = validate_targets(targets)
        spec = validate_spec(spec if spec is not None else CheckSpec())
        self._validate_deadline(deadline)

        async def run_checks(host: str, result: ProbeResult) -> None:
            await self._run_common_checks(host, result, spec)
            if spec.tcp_port is not None:
                is_open, note = await tcp_check(host, spec.tcp_port, spec.timeout)
                result.tcp_port = spec.tcp_port
                result.tcp_port_open = is_open
                if note:
                    result.notes.append(note)

        return await self._run_batch(
            targets,
            ProbeResult,
            run_checks,
            deadline=deadline,
            cancel_event=cancel_event,
        )

    async def ready(
        self,
        targets: Sequence[Any],
        handshake: Handshake,
        *,
        protocol: str,
        port: int,
        spec: CheckSpec | None = None,
        port_diagnostic: bool = True,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[ProtocolReadiness]:
        """Check protocol readiness of every target, in order.

        The handshake decides protocol_ok. When port_diagnostic is set, a TCP
        check on the same port runs afterwards and is reported alongside, but
        never changes protocol_ok.

        Args:
            targets: Host names, FQDNs or IP literals
            handshake: Async callable (host, port, timeout) -> detail
            protocol: Protocol label, e.g. "winrm"
            port: Port for the handshake and the TCP diagnostic
            spec: DNS/ICMP selection and per-check timeout. tcp_port must be unset.
            port_diagnostic: Also run the TCP check on port
            deadline: Optional overall time limit in seconds
            cancel_event: Optional event that cancels the batch when set

        Returns:
            List of ProtocolReadiness aligned with targets

        Raises:
            ProbeInputError: If targets, spec, port or deadline is malformed
        """
        targets = validate_targets(targets)
        spec = validate_spec(spec if spec is not None else CheckSpec())
        if spec.tcp_port is not None:
            raise ProbeInputError(
                "spec.tcp_port must be unset for readiness checks, use port instead"
            )
        validate_port(port, "port")
        self._validate_deadline(deadline)

        def make_result(target: str) -> ProtocolReadiness:
            return ProtocolReadiness(target=target, protocol=protocol)

        async def run_checks(host: str, result: ProtocolReadiness) -> None:
            await self._run_common_checks(host, result, spec)

            try:
                detail = await asyncio.wait_for(
                    handshake(host, port, spec.timeout),
                    timeout=spec.timeout,
                )
            except Exception as e:
                cause = describe_error(e)
                result.protocol_port = port
                result.protocol_ok = False
                result.protocol_error = cause
                result.notes.append(f"{protocol.upper()} handshake failed: {cause}")
                self.logger.debug(
                    "%s handshake with %s:%d failed: %s", protocol, host, port, cause
                )
            else:
                result.protocol_port = port
                result.protocol_ok = True
                result.protocol_detail = detail

            if port_diagnostic:
                is_open, note = await tcp_check(host, port, spec.timeout)
                result.tcp_port = port
                result.tcp_port_open = is_open
                if note:
                    result.notes.append(note)

        return await self._run_batch(
            targets,
            make_result,
            run_checks,
            deadline=deadline,
            cancel_event=cancel_event,
        )

    async def winrm_ready(
        self,
        targets: Sequence[Any],
        *,
        https: bool = False,
        port: int | None = None,
        spec: CheckSpec | None = None,
        credentials: tuple[str, str] | None = None,
        verify_tls: bool = False,
        port_diagnostic: bool = True,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
        handshake: Handshake | None = None,
    ) -> list[ProtocolReadiness]:
        """Check WinRM readiness with a WS-Management Identify handshake.

        Port defaults to 5985, or 5986 when https is set.
        """
        if port is None:
            port = WINRM_HTTPS_PORT if https else WINRM_HTTP_PORT
        if handshake is None:
            handshake = WinRMIdentify(
                https=https,
                verify_tls=verify_tls,
                credentials=credentials,
            )
        return await self.ready(
            targets,
            handshake,
            protocol="winrm",
            port=port,
            spec=spec,
            port_diagnostic=port_diagnostic,
            deadline=deadline,
            cancel_event=cancel_event,
        )

    async def ssh_ready(
        self,
        targets: Sequence[Any],
        *,
        port: int = SSH_PORT,
        spec: CheckSpec | None = None,
        port_diagnostic: bool = True,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
        handshake: Handshake | None = None,
    ) -> list[ProtocolReadiness]:
        """Check SSH readiness by completing key exchange with each target."""
        return await self.ready(
            targets,
            handshake or ssh_host_key,
            protocol="ssh",
            port=port,
            spec=spec,
            port_diagnostic=port_diagnostic,
            deadline=deadline,
            cancel_event=cancel_event,
        )

    @staticmethod
    def _validate_deadline(deadline: float | None) -> None:
        if deadline is not None:
            validate_timeout(deadline, "deadline")

    async def _run_common_checks(
        self,
        host: str,
        result: ProbeResult,
        spec: CheckSpec,
    ) -> None:
        """Run the DNS and ICMP checks requested by spec, in that order."""
        if spec.dns:
            resolved, addresses, note = await dns_check(host, spec.timeout)
            result.dns_resolved = resolved
            result.dns_addresses = addresses
            if note:
                result.notes.append(note)

        if spec.icmp:
            reachable, note = await icmp_check(host, spec.timeout)
            result.icmp_reachable = reachable
            if note:
                result.notes.append(note)

    async def _run_batch(
        self,
        targets: Sequence[Any],
        make_result: Callable[[str], R],
        run_checks: Callable[[str, R], Awaitable[None]],
        *,
        deadline: float | None,
        cancel_event: asyncio.Event | None,
    ) -> list[R]:
        """Run run_checks for every target concurrently and collect results."""
        targets = list(targets)
        partials = [make_result(t if isinstance(t, str) else "") for t in targets]
        slots: list[R | None] = [None] * len(targets)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(index: int) -> None:
            result = partials[index]
            target = targets[index]
            if not is_valid_target(target):
                result.notes.append(INVALID_TARGET_NOTE)
                slots[index] = result
                return

            async with semaphore:
                try:
                    await run_checks(target.strip(), result)
                except Exception as e:
                    self.logger.exception("Probe of %r failed unexpectedly", target)
                    result.notes.append(f"probe failed: {describe_error(e)}")
            slots[index] = result

        self.logger.debug(
            "Probing %d target(s) (max_concurrency=%d, deadline=%s)",
            len(targets),
            self.max_concurrency,
            deadline,
        )
        tasks = [
            asyncio.create_task(run_one(i), name=f"probe-{i}")
            for i in range(len(targets))
        ]
        try:
            await self._wait(tasks, deadline, cancel_event)
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        cancelled = 0
        results: list[R] = []
        for index, slot in enumerate(slots):
            if slot is None:
                slot = partials[index]
                slot.notes.append(CANCELLED_NOTE)
                cancelled += 1
            results.append(slot)

        if cancelled:
            self.logger.warning(
                "Batch cancelled: %d of %d target(s) did not finish",
                cancelled,
                len(results),
            )
        return results

    async def _wait(
        self,
        tasks: list["asyncio.Task[None]"],
        deadline: float | None,
        cancel_event: asyncio.Event | None,
    ) -> None:
        """Wait until all tasks finish, the deadline passes or the event is set."""
        if not tasks:
            return

        loop = asyncio.get_running_loop()
        end = None if deadline is None else loop.time() + deadline
        stopper = (
            asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None
        )
        pending: set[asyncio.Future[Any]] = set(tasks)
        try:
            while pending:
                watch = (pending | {stopper}) if stopper is not None else pending
                timeout = None if end is None else max(0.0, end - loop.time())
                done, _ = await asyncio.wait(
                    watch,
                    timeout=timeout,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if stopper is not None and stopper in done:
                    self.logger.info("Batch cancel requested")
                    return
                if not done:
                    self.logger.info("Batch deadline of %.1fs reached", deadline)
                    return
                pending -= done
        finally:
            if stopper is not None and not stopper.done():
                stopper.cancel()
