"""
Map codec settings for celeste_maped.
"""

from .types import SettingsSection


class MapSettings(SettingsSection):
    """Manages how map files are decoded."""

    @property
    def strict_elements(self) -> bool:
        """Raise on registered elements that fail to decode instead of keeping them raw."""
        return self._get_bool("maps/strict_elements", False)

    @strict_elements.setter
    def strict_elements(self, value: bool) -> None:
        self._set("maps/strict_elements", value)

    @property
    def allow_trailing_data(self) -> bool:
        """Accept files with bytes after the root element."""
        return self._get_bool("maps/allow_trailing_data", False)

    @allow_trailing_data.setter
    def allow_trailing_data(self, value: bool) -> None:
        self._set("maps/allow_trailing_data", value)
