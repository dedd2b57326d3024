"""Global state management for Reach MCP."""

from reach_mcp.config import Config
from reach_mcp.services.prober import BatchProber

# Global state (initialized on first access)
_config: Config | None = None
_prober: BatchProber | None = None


def get_config() -> Config:
    """Get or create config."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_prober() -> BatchProber:
    """Get or create the batch prober."""
    global _prober
    if _prober is None:
        config = get_config()
        _prober = BatchProber(max_concurrency=config.max_concurrency)
    return _prober


def reset_state() -> None:
    """Reset global state for testing.

    Clears the singleton instances so tests start with fresh state.
    """
    global _config, _prober
    _config = None
    _prober = None


def set_config(config: Config) -> None:
    """Set the global config instance.

    Args:
        config: Config instance to use globally.
    """
    global _config
    _config = config


def set_prober(prober: BatchProber) -> None:
    """Set the global prober instance.

    Args:
        prober: BatchProber instance to use globally.
    """
    global _prober
    _prober = prober
