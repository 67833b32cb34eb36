"""Configuration models for viewset."""

from viewset.config.models.observability import LoggingConfig, ObservabilityConfig
from viewset.config.models.views import ViewsConfig

__all__ = ["LoggingConfig", "ObservabilityConfig", "ViewsConfig"]
