"""Infrastructure layer: configuration, logging, metrics, tracing and wiring."""

from container_resources.infrastructure.config import Config, get_config
from container_resources.infrastructure.logging import get_logger, setup_logging

__all__ = [
    "Config",
    "get_config",
    "get_logger",
    "setup_logging",
]
