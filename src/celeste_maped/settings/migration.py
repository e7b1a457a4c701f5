"""
Settings migration system for celeste_maped.
"""

import logging
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", ""))

        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value and to_version == ConfigVersion.V1_1.value:
            self._migrate_1_0_to_1_1()
        else:
            logger.warning(f"No migration path from {from_version}, keeping stored values")

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from version 1.0 to 1.1: the codec group became maps."""
        logger.debug("Performing migration from 1.0 to 1.1")

        if self.settings.contains("codec/strict"):
            strict = self.settings.value("codec/strict", False)
            self.settings.setValue("maps/strict_elements", strict)
            self.settings.remove("codec/strict")
            logger.info(f"Migrated codec/strict to maps/strict_elements: {strict}")

        if self.settings.contains("codec/allow_trailing"):
            allow = self.settings.value("codec/allow_trailing", False)
            self.settings.setValue("maps/allow_trailing_data", allow)
            self.settings.remove("codec/allow_trailing")
            logger.info(f"Migrated codec/allow_trailing to maps/allow_trailing_data: {allow}")

        self.settings.sync()
