"""Configuration and logging for the HR Employee Connect front end."""

from .config import Settings, get_settings
from .logging import build_tracer_provider, configure_logging, setup_observability

__all__ = ["Settings", "build_tracer_provider", "configure_logging", "get_settings", "setup_observability"]
