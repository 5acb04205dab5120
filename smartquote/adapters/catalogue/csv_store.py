"""CSV catalogue store adapter.

Reads the product catalogue and alias table from two CSV files and hands
out an immutable CatalogueSnapshot. The snapshot is cached until
:meth:`CSVCatalogueStore.reload` is called, so every quote processed in
between sees the same catalogue.
"""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ...config import CatalogueConfig, get_config
from ...domain.errors import CatalogueError, ValidationError
from ...domain.models import CatalogueEntry, CatalogueSnapshot

_TRUE_VALUES = frozenset({"1", "true", "yes", "y"})


def _parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def _parse_float(value: Optional[str]) -> float:
    text = (value or "").strip()
    return float(text) if text else 0.0


@dataclass
class CSVCatalogueStore:
    """Catalogue store backed by ``products.csv`` and ``aliases.csv``.

    Implements CatalogueStorePort. A missing aliases file is treated as an
    empty alias table; a missing products file is an error.

    Attributes:
        config: Catalogue configuration (data directory and file names)
    """

    config: CatalogueConfig = field(default_factory=lambda: get_config().catalogue)

    _snapshot: Optional[CatalogueSnapshot] = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load_snapshot(self) -> CatalogueSnapshot:
        """Load (or return the cached) catalogue snapshot.

        Raises:
            CatalogueError: If a file cannot be read or a row is malformed.
        """
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._load()
            return self._snapshot

    def reload(self) -> CatalogueSnapshot:
        """Drop the cached snapshot and read the files again."""
        with self._lock:
            self._snapshot = None
        return self.load_snapshot()

    def _load(self) -> CatalogueSnapshot:
        products_path = self.config.products_path
        aliases_path = self.config.aliases_path

        self._logger.debug(
            "Loading catalogue",
            extra={"products_path": str(products_path), "aliases_path": str(aliases_path)},
        )

        entries = self._read_products(products_path)
        aliases = self._read_aliases(aliases_path)
        snapshot = CatalogueSnapshot.build(entries, aliases)

        self._logger.info(
            "Catalogue loaded",
            extra={"entries": len(snapshot), "aliases": len(snapshot.aliases)},
        )
        return snapshot

    def _read_products(self, path: Path) -> List[CatalogueEntry]:
        entries: List[CatalogueEntry] = []
        try:
            with path.open(encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f)
                for row_number, row in enumerate(reader, start=2):
                    key = (row.get("key") or "").strip()
                    if not key:
                        continue
                    try:
                        entries.append(
                            CatalogueEntry(
                                key=key,
                                name=(row.get("name") or key).strip(),
                                install_time_hours=_parse_float(row.get("install_time_hours")),
                                waste_volume_m3=_parse_float(row.get("waste_volume_m3")),
                                is_heavy=_parse_bool(row.get("is_heavy")),
                                category=(row.get("category") or "").strip(),
                            )
                        )
                    except (ValueError, ValidationError) as e:
                        raise CatalogueError(
                            f"Invalid catalogue row {row_number} ({key!r})",
                            file_path=str(path),
                            cause=e,
                        )
        except OSError as e:
            raise CatalogueError(
                f"Failed to read catalogue: {e}",
                file_path=str(path),
                cause=e,
            )
        return entries

    def _read_aliases(self, path: Path) -> Dict[str, str]:
        if not path.exists():
            self._logger.info("No alias file found", extra={"aliases_path": str(path)})
            return {}

        aliases: Dict[str, str] = {}
        try:
            with path.open(encoding="utf-8", newline="") as f:
                for row in csv.DictReader(f):
                    alias = (row.get("alias") or "").strip()
                    key = (row.get("key") or "").strip()
                    if alias and key:
                        aliases[alias] = key
        except OSError as e:
            raise CatalogueError(
                f"Failed to read aliases: {e}",
                file_path=str(path),
                cause=e,
            )
        return aliases
