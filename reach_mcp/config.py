"""Configuration management for Reach MCP."""

import logging
import os
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path

from reach_mcp.models import CheckSpec

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


def _get_env_int(key: str) -> int | None:
    if val := os.getenv(key):
        with suppress(ValueError):
            return int(val)
        logger.warning("Invalid int for %s: %s, ignoring", key, val)
    return None


def _get_env_float(key: str) -> float | None:
    if val := os.getenv(key):
        with suppress(ValueError):
            return float(val)
        logger.warning("Invalid number for %s: %s, ignoring", key, val)
    return None


def _get_env_bool(key: str) -> bool | None:
    if val := os.getenv(key):
        return val.lower() in _TRUE_VALUES
    return None


@dataclass
class Config:
    """Reach MCP configuration."""

    timeout: float = 3.0  # seconds per check
    max_concurrency: int = 32  # targets probed at once
    deadline: float | None = None  # overall batch limit, seconds
    targets_file: Path | None = None
    # Checks used by the targets://status resource
    default_dns: bool = True
    default_icmp: bool = False
    default_tcp_port: int | None = None
    # WinRM handshake
    winrm_https: bool = False
    winrm_verify_tls: bool = False
    winrm_credentials: tuple[str, str] | None = field(default=None, repr=False)
    # Transport configuration
    transport: str = "http"  # "http" or "stdio"
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    _targets: list[str] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Apply REACH_* environment variable overrides."""
        val = _get_env_float("REACH_TIMEOUT")
        if val is not None:
            if val <= 0:
                logger.warning(
                    "REACH_TIMEOUT must be > 0, got %s. Using default: %s",
                    val,
                    self.timeout,
                )
            else:
                self.timeout = val

        conc = _get_env_int("REACH_MAX_CONCURRENCY")
        if conc is not None:
            if conc <= 0:
                logger.warning(
                    "REACH_MAX_CONCURRENCY must be > 0, got %d. Using default: %d",
                    conc,
                    self.max_concurrency,
                )
            else:
                self.max_concurrency = conc

        val = _get_env_float("REACH_DEADLINE")
        if val is not None:
            if val <= 0:
                logger.warning("REACH_DEADLINE must be > 0, got %s. Ignoring", val)
            else:
                self.deadline = val

        if targets_file := os.getenv("REACH_TARGETS_FILE"):
            self.targets_file = Path(targets_file).expanduser()

        flag = _get_env_bool("REACH_DEFAULT_DNS")
        if flag is not None:
            self.default_dns = flag

        flag = _get_env_bool("REACH_DEFAULT_ICMP")
        if flag is not None:
            self.default_icmp = flag

        port = _get_env_int("REACH_DEFAULT_TCP_PORT")
        if port is not None:
            if 1 <= port <= 65535:
                self.default_tcp_port = port
            else:
                logger.warning("REACH_DEFAULT_TCP_PORT out of range: %d, ignoring", port)

        flag = _get_env_bool("REACH_WINRM_HTTPS")
        if flag is not None:
            self.winrm_https = flag

        flag = _get_env_bool("REACH_WINRM_VERIFY_TLS")
        if flag is not None:
            self.winrm_verify_tls = flag

        username = os.getenv("REACH_WINRM_USERNAME")
        if username:
            self.winrm_credentials = (username, os.getenv("REACH_WINRM_PASSWORD", ""))

        transport = os.getenv("REACH_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            self.transport = transport

        if http_host := os.getenv("REACH_HTTP_HOST"):
            self.http_host = http_host

        http_port = _get_env_int("REACH_HTTP_PORT")
        if http_port is not None:
            self.http_port = http_port

        logger.debug(
            "Config initialized: transport=%s, timeout=%.1fs, "
            "max_concurrency=%d, deadline=%s, targets_file=%s",
            self.transport,
            self.timeout,
            self.max_concurrency,
            self.deadline,
            self.targets_file,
        )

    def get_targets(self) -> list[str]:
        """Return targets from the targets file.

        One target per line. Blank lines and # comments are skipped,
        duplicates are kept. A missing or unreadable file yields no targets.
        """
        if self._targets is not None:
            return list(self._targets)

        targets: list[str] = []
        if self.targets_file is None:
            self._targets = targets
            return []

        try:
            content = self.targets_file.read_text()
        except OSError as e:
            logger.warning("Cannot read targets file %s: %s", self.targets_file, e)
            self._targets = targets
            return []

        for line in content.splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                targets.append(line)

        logger.debug("Loaded %d target(s) from %s", len(targets), self.targets_file)
        self._targets = targets
        return list(targets)

    def default_spec(self) -> CheckSpec:
        """Build the CheckSpec used for configured-target status reports."""
        return CheckSpec(
            dns=self.default_dns,
            icmp=self.default_icmp,
            tcp_port=self.default_tcp_port,
            timeout=self.timeout,
        )
