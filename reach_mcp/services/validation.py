"""Validation services."""

from typing import Any

from reach_mcp.models import CheckSpec


class ProbeInputError(ValueError):
    """Malformed input to a batch call, raised before any target is probed."""


def is_valid_target(target: Any) -> bool:
    """Return True if target is a non-blank string."""
    return isinstance(target, str) and bool(target.strip())


def validate_targets(targets: Any) -> list[Any]:
    """Validate the target list of a batch call.

    Individual entries are not checked here, a blank or non-string entry is
    reported per target instead.

    Raises:
        ProbeInputError: If targets is a string or not iterable
    """
    if isinstance(targets, (str, bytes)):
        raise ProbeInputError("targets must be a list of hosts, not a single string")
    try:
        return list(targets)
    except TypeError:
        raise ProbeInputError(
            f"targets must be a list of hosts, got {type(targets).__name__}"
        ) from None


def validate_port(port: Any, name: str = "tcp_port") -> int:
    """Validate a TCP port number.

    Args:
        port: Value to validate
        name: Parameter name used in the error message

    Returns:
        The port as an int

    Raises:
        ProbeInputError: If port is not an integer in 1-65535
    """
    if isinstance(port, bool) or not isinstance(port, int):
        raise ProbeInputError(f"{name} must be an integer, got {port!r}")
    if not 1 <= port <= 65535:
        raise ProbeInputError(f"{name} must be in range 1-65535, got {port}")
    return port


def validate_timeout(value: Any, name: str) -> float:
    """Validate a positive duration in seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProbeInputError(f"{name} must be a number of seconds, got {value!r}")
    if value <= 0:
        raise ProbeInputError(f"{name} must be > 0, got {value}")
    return float(value)


def validate_spec(spec: Any) -> CheckSpec:
    """Validate a CheckSpec for a batch call.

    Args:
        spec: CheckSpec to validate

    Returns:
        CheckSpec: The validated spec

    Raises:
        ProbeInputError: If the spec is malformed
    """
    if not isinstance(spec, CheckSpec):
        raise ProbeInputError(f"spec must be a CheckSpec, got {type(spec).__name__}")
    if spec.tcp_port is not None:
        validate_port(spec.tcp_port)
    validate_timeout(spec.timeout, "timeout")
    return spec
