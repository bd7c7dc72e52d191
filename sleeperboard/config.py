"""Dashboard configuration management."""

from functools import lru_cache
from pathlib import Path

from .constants import DEFAULT_CONFIG_PATH
from .schemas import DashboardConfig, ScoringRuleset
from .utils import load_json


@lru_cache(maxsize=4)
def get_config(path: str | Path | None = None) -> DashboardConfig:
    """
    Load dashboard configuration from data/league_config.json.

    Configuration is cached after first load. Pass an explicit path to
    load a different file (each path is cached separately).

    Returns:
        DashboardConfig object with validated settings

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file has invalid structure

    Example:
        from sleeperboard.config import get_config
        config = get_config()
        print(f"League: {config.league_id}")
    """
    return load_json(path or DEFAULT_CONFIG_PATH, schema=DashboardConfig)


def get_update_interval(config: DashboardConfig | None = None) -> int:
    """Get the refresh interval in seconds."""
    return (config or get_config()).update_interval_seconds


def get_scoring_override(config: DashboardConfig | None = None) -> ScoringRuleset | None:
    """Get the configured ruleset, or None to use the league's own settings."""
    return (config or get_config()).scoring


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
