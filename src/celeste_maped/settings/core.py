"""
Core settings management for celeste_maped.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigError, ConfigVersion, SettingsSection, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .logging import LoggingSettings
from .maps import MapSettings
from .saves import SaveSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "celeste_maped"
APPLICATION = "celeste_maped"


class AppSettings:
    """
    Configuration management using QSettings.

    Settings live in the platform store by default, or in an INI file when
    settings_file is given. Every profile is a separate group.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: INI file to use instead of the platform store

        Raises:
            ConfigError: If the settings store cannot be read or written
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        # Hierarchy: celeste_maped/celeste_maped/<profile>/...
        self.settings.beginGroup(profile)

        self._app = SettingsSection(self.settings)
        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._logging = LoggingSettings(self.settings)
        self._maps = MapSettings(self.settings)
        self._saves = SaveSettings(self.settings)

        self._migrator.ensure_version()
        self._check_status()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def maps(self) -> MapSettings:
        """Access map codec settings subsystem."""
        return self._maps

    @property
    def saves(self) -> SaveSettings:
        """Access save file settings subsystem."""
        return self._saves

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        return self._app._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self._app._get_str("app/version", ConfigVersion.CURRENT.value)

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage.

        Raises:
            ConfigError: If the settings store cannot be written
        """
        self.settings.sync()
        self._check_status()

    def _check_status(self) -> None:
        status = self.settings.status()
        if status == QSettings.Status.AccessError:
            raise ConfigError(f"Cannot access settings file: {self.settings.fileName()}")
        if status == QSettings.Status.FormatError:
            raise ConfigError(f"Malformed settings file: {self.settings.fileName()}")
