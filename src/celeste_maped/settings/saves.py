"""
Save file settings for celeste_maped.
"""

from .types import SettingsSection


class SaveSettings(SettingsSection):
    """Manages how save files are written."""

    @property
    def indent_output(self) -> bool:
        """Indent written save XML by two spaces per level."""
        return self._get_bool("saves/indent_output", True)

    @indent_output.setter
    def indent_output(self, value: bool) -> None:
        self._set("saves/indent_output", value)
