"""Configuration management."""

from mergegate.config.loader import load_config
from mergegate.config.settings import Backend, Settings

__all__ = ["Backend", "Settings", "load_config"]
