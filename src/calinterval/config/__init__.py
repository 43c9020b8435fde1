"""Configuration layer — settings discovery and logging setup."""

from calinterval.config.logging import configure_logging
from calinterval.config.settings import CalintervalSettings

__all__ = ["CalintervalSettings", "configure_logging"]
