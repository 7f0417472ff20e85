"""Maestro configuration.

    from maestro.config import get_settings

    capacity = get_settings().sessions.capacity
"""

from functools import lru_cache

from maestro.config.loader import load_config
from maestro.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings.

    Model defaults, then the TOML layers, then MAESTRO_* environment
    variables (highest priority). Cached until reload_settings().
    """
    Settings.use_toml_layers(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Re-read the TOML layers and environment."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
