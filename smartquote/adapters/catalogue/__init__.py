"""Catalogue store adapters."""

from .csv_store import CSVCatalogueStore

__all__ = ["CSVCatalogueStore"]
