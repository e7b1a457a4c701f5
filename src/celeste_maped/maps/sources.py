"""
Entry sources: where map files are read from.

Anything with open(entry_name) -> bytes can serve maps, such as a mod
archive or a game install. Only the directory adapter ships here.
"""

import logging
from pathlib import Path
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class EntrySource(Protocol):
    """Provider of named binary entries."""

    def open(self, entry_name: str) -> bytes:
        """Return the full contents of entry_name.

        Raises:
            FileNotFoundError: If the entry does not exist
        """
        ...


class DirectorySource:
    """Entries are files below a root directory, named with '/' separators."""

    def __init__(self, root: Union[str, Path]):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.root = Path(root)

    def _resolve(self, entry_name: str) -> Path:
        path = (self.root / entry_name).resolve()
        root = self.root.resolve()
        if path != root and root not in path.parents:
            raise FileNotFoundError(f"Entry '{entry_name}' is outside of {self.root}")
        return path

    def open(self, entry_name: str) -> bytes:
        path = self._resolve(entry_name)
        self.logger.debug(f"Opening entry '{entry_name}' at {path}")
        return path.read_bytes()

    def entries(self, suffix: str = ".bin") -> list[str]:
        """Names of every file below the root ending in suffix, sorted."""
        return sorted(
            path.relative_to(self.root).as_posix()
            for path in self.root.rglob(f"*{suffix}")
            if path.is_file()
        )
