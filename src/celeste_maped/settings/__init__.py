"""
Settings package for celeste_maped.

Configuration management on top of Qt's QSettings for cross-platform
storage, or an INI file for scripted use.

Usage:
    from celeste_maped.settings import AppSettings

    settings = AppSettings(settings_file="celeste_maped.ini")
    settings.maps.strict_elements = True
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .logging import LoggingSettings
from .maps import MapSettings
from .saves import SaveSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "LoggingSettings",
    "MapSettings",
    "SaveSettings",
]
