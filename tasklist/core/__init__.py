"""Core app configuration, security and persistence."""

from tasklist.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
