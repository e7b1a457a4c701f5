"""Map manager for reading and writing map files.

Ties the container codec, the element registry and the map settings
together behind file-level operations.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .document import MapDocument
from .export import export_json
from .registry import ElementRegistry, default_registry
from .sources import EntrySource

if TYPE_CHECKING:
    from ..settings import AppSettings


class MapManager:
    """Reads and writes maps with one registry and one set of options.

    Without settings, element decoding is lenient and trailing bytes are
    rejected.
    """

    def __init__(
        self,
        registry: Optional[ElementRegistry] = None,
        settings: Optional["AppSettings"] = None,
    ):
        """Initialize the manager.

        Args:
            registry: Element types to resolve; the built-in set when None
            settings: Source of the map codec options
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings

    @property
    def strict(self) -> bool:
        return self.settings.maps.strict_elements if self.settings else False

    @property
    def allow_trailing_data(self) -> bool:
        return self.settings.maps.allow_trailing_data if self.settings else False

    # === BYTES ===

    def read(self, data: bytes) -> MapDocument:
        """Decode a map from bytes.

        Raises:
            MapReadError: If the container is malformed
            ElementParseError: If strict decoding is enabled and an element fails
        """
        document = MapDocument.decode(
            data, self.registry, self.strict, self.allow_trailing_data
        )
        for warning in document.warnings:
            self.logger.debug(f"Decode warning: {warning}")
        return document

    def write(self, document: MapDocument) -> bytes:
        """Encode a map; the same document always gives the same bytes.

        Raises:
            MapWriteError: If the tree does not fit the format
        """
        return document.encode(self.registry)

    # === FILES ===

    def read_file(self, path: Union[str, Path]) -> MapDocument:
        path = Path(path)
        self.logger.info(f"Loading map: {path}")
        return self.read(path.read_bytes())

    def write_file(self, path: Union[str, Path], document: MapDocument) -> None:
        """Encode document and write it to path.

        The file is only touched once encoding has succeeded.
        """
        path = Path(path)
        data = self.write(document)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self.logger.info(f"Saved map '{document.package}' to {path} ({len(data)} bytes)")

    def read_entry(self, source: EntrySource, entry_name: str) -> MapDocument:
        """Decode a map provided by an entry source."""
        self.logger.info(f"Loading map entry: {entry_name}")
        return self.read(source.open(entry_name))

    # === INSPECTION ===

    def export_json(self, document: MapDocument) -> bytes:
        """Dump the document's raw tree as JSON with value kinds."""
        return export_json(document.to_raw(self.registry))
