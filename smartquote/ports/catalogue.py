"""Catalogue port - Abstraction over the product catalogue store.

The store owns loading and caching; the resolver only ever sees the
immutable snapshot it returns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import CatalogueSnapshot


class CatalogueStorePort(Protocol):
    """Port for loading catalogue snapshots.

    Implementation: adapters/catalogue/csv_store.py
    """

    def load_snapshot(self) -> CatalogueSnapshot:
        """Load the current catalogue and alias table.

        Returns:
            A read-only snapshot to pass into resolver calls.

        Raises:
            CatalogueError: If the catalogue cannot be loaded.
        """
        ...
