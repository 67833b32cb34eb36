"""Observability: structured logging for the template registry.

Provides standardized logging primitives using structlog.
"""

from viewset.observability.logging import (
    configure_logging,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)

__all__ = ["configure_logging", "get_logger", "setup_logging", "setup_logging_from_settings"]
