"""
Lotman Adapters.

Implementations of protocols for external systems.
"""

from lotman.adapters.catalog import (
    CatalogPackingSource,
    get_packing_source,
    reset_packing_source,
)
from lotman.adapters.noop import NoopPackingSource

__all__ = [
    "CatalogPackingSource",
    "NoopPackingSource",
    "get_packing_source",
    "reset_packing_source",
]
