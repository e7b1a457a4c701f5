"""
Settings validation system for celeste_maped.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

from .logging import LOG_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        level = self.settings.logging.console_log_level
        if level.upper() not in LOG_LEVELS:
            errors.append(f"Unknown console log level: {level}")

        if self.settings.logging.file_logging:
            log_dir = Path(self.settings.logging.log_file_path).parent
            if log_dir.exists() and not log_dir.is_dir():
                errors.append(f"Log directory is not a directory: {log_dir}")

        if self.settings.maps.allow_trailing_data:
            warnings.append("Maps with trailing data are accepted; such bytes are dropped on save")

        if self.settings.maps.strict_elements:
            warnings.append("Strict element decoding is enabled; mod maps may fail to load")

        for warning in warnings:
            logger.debug(f"Settings warning: {warning}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
