"""
Configuration package.

Exports the singleton settings instance for easy importing.

Usage:
    from lms.config import settings

    print(settings.connection_url())
"""

from lms.config.settings import Settings, settings, get_settings, print_settings

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "print_settings",
]
