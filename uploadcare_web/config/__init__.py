"""
Application configuration using Pydantic settings.

Configuration comes from UPLOADCARE_* environment variables with defaults
suitable for local development.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
