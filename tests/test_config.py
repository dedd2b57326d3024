"""Tests for configuration module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from reach_mcp.config import Config
from reach_mcp.models import CheckSpec


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove REACH_* variables that could leak in from the environment."""
    for key in (
        "REACH_TIMEOUT",
        "REACH_MAX_CONCURRENCY",
        "REACH_DEADLINE",
        "REACH_TARGETS_FILE",
        "REACH_DEFAULT_DNS",
        "REACH_DEFAULT_ICMP",
        "REACH_DEFAULT_TCP_PORT",
        "REACH_WINRM_HTTPS",
        "REACH_WINRM_VERIFY_TLS",
        "REACH_WINRM_USERNAME",
        "REACH_WINRM_PASSWORD",
        "REACH_TRANSPORT",
        "REACH_HTTP_HOST",
        "REACH_HTTP_PORT",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = Config()

    assert config.timeout == 3.0
    assert config.max_concurrency == 32
    assert config.deadline is None
    assert config.targets_file is None
    assert config.transport == "http"
    assert config.winrm_credentials is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REACH_TIMEOUT", "1.5")
    monkeypatch.setenv("REACH_MAX_CONCURRENCY", "8")
    monkeypatch.setenv("REACH_DEADLINE", "30")
    monkeypatch.setenv("REACH_TARGETS_FILE", str(tmp_path / "targets.txt"))
    monkeypatch.setenv("REACH_DEFAULT_DNS", "false")
    monkeypatch.setenv("REACH_DEFAULT_ICMP", "yes")
    monkeypatch.setenv("REACH_DEFAULT_TCP_PORT", "5985")
    monkeypatch.setenv("REACH_WINRM_HTTPS", "1")
    monkeypatch.setenv("REACH_TRANSPORT", "STDIO")
    monkeypatch.setenv("REACH_HTTP_PORT", "9000")

    config = Config()

    assert config.timeout == 1.5
    assert config.max_concurrency == 8
    assert config.deadline == 30.0
    assert config.targets_file == tmp_path / "targets.txt"
    assert config.default_dns is False
    assert config.default_icmp is True
    assert config.default_tcp_port == 5985
    assert config.winrm_https is True
    assert config.transport == "stdio"
    assert config.http_port == 9000


def test_invalid_values_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REACH_TIMEOUT", "soon")
    monkeypatch.setenv("REACH_MAX_CONCURRENCY", "0")
    monkeypatch.setenv("REACH_DEFAULT_TCP_PORT", "70000")
    monkeypatch.setenv("REACH_TRANSPORT", "carrier-pigeon")

    config = Config()

    assert config.timeout == 3.0
    assert config.max_concurrency == 32
    assert config.default_tcp_port is None
    assert config.transport == "http"


def test_negative_timeout_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REACH_TIMEOUT", "-2")
    assert Config().timeout == 3.0


def test_winrm_credentials_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REACH_WINRM_USERNAME", "CORP\\svc-probe")
    monkeypatch.setenv("REACH_WINRM_PASSWORD", "hunter2")

    config = Config()

    assert config.winrm_credentials == ("CORP\\svc-probe", "hunter2")
    assert "hunter2" not in repr(config)


def test_get_targets_reads_file(tmp_path: Path) -> None:
    """Comments and blank lines are skipped, duplicates kept."""
    targets_file = tmp_path / "targets.txt"
    targets_file.write_text(
        "# domain controllers\n"
        "dc01.corp.example\n"
        "dc02.corp.example  # secondary\n"
        "\n"
        "10.0.0.5\n"
        "dc01.corp.example\n"
    )

    config = Config(targets_file=targets_file)

    assert config.get_targets() == [
        "dc01.corp.example",
        "dc02.corp.example",
        "10.0.0.5",
        "dc01.corp.example",
    ]


def test_get_targets_is_cached(tmp_path: Path) -> None:
    targets_file = tmp_path / "targets.txt"
    targets_file.write_text("dc01\n")
    config = Config(targets_file=targets_file)

    assert config.get_targets() == ["dc01"]
    targets_file.write_text("dc02\n")
    assert config.get_targets() == ["dc01"]


def test_get_targets_missing_file(tmp_path: Path) -> None:
    config = Config(targets_file=tmp_path / "missing.txt")
    assert config.get_targets() == []


def test_get_targets_without_file() -> None:
    assert Config().get_targets() == []


def test_default_spec() -> None:
    config = Config(default_dns=True, default_icmp=True, default_tcp_port=5986, timeout=2.0)

    assert config.default_spec() == CheckSpec(dns=True, icmp=True, tcp_port=5986, timeout=2.0)


@pytest.mark.parametrize("value", ["0", "-5", "later"])
def test_invalid_deadline_is_warned_and_ignored(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv("REACH_DEADLINE", value)

    with patch("reach_mcp.config.logger") as mock_logger:
        config = Config()

    assert config.deadline is None
    mock_logger.warning.assert_called_once()
    assert "REACH_DEADLINE" in str(mock_logger.warning.call_args)
