"""Catalog adapter factory.

Provides get_catalog() / set_catalog() to swap implementations. The adapter
is chosen by the CATALOG_ADAPTER environment variable; only the in-process
``fake`` adapter ships with this package, real deployments inject theirs
with set_catalog().
"""

import os

from procurement.catalog.port import CatalogPort

_current_catalog: CatalogPort | None = None


def get_catalog() -> CatalogPort:
    """Return the active catalog adapter."""
    global _current_catalog
    if _current_catalog is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "fake")
        if adapter == "fake":
            from procurement.catalog.fake_adapter import FakeCatalog

            _current_catalog = FakeCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _current_catalog


def set_catalog(catalog: CatalogPort) -> None:
    """Override the active catalog adapter."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default adapter (useful for testing)."""
    global _current_catalog
    _current_catalog = None
