"""Configuration loading for viewset.

Usage:
    from viewset import Views
    from viewset.config import get_settings
    from viewset.observability import setup_logging_from_settings

    settings = get_settings()
    setup_logging_from_settings(settings)
    views = Views.from_config(settings.views)
"""

from functools import lru_cache

from viewset.config.loader import load_config
from viewset.config.models.views import ViewsConfig
from viewset.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the config directory's TOML layers and the environment.

    Cached for the life of the process; see reload_settings().
    """
    return Settings.from_toml(load_config())


def reload_settings() -> Settings:
    """Clear the settings cache and read configuration again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings", "ViewsConfig"]
