"""
Lotman Catalog Adapter — standard packing from the StandardPacking table.

This module also loads the configured PackingSource from settings.

Usage:
    from lotman.adapters import get_packing_source

    source = get_packing_source()
    source.standard_for("B001003")  # 250

Settings:
    LOTMAN = {
        "PACKING_SOURCE": "lotman.adapters.catalog.CatalogPackingSource",
    }

The catalogue is cached per source instance. Call invalidate() (or
reset_packing_source()) after editing StandardPacking rows.
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from lotman.conf import lotman_settings
from lotman.matching import normalize_code
from lotman.protocols.packing import PackingSource

logger = logging.getLogger(__name__)


class CatalogPackingSource:
    """PackingSource backed by the StandardPacking model."""

    def __init__(self):
        self._lock = threading.Lock()
        self._cache: dict[str, int] | None = None

    def _load(self) -> dict[str, int]:
        from lotman.models.packing import StandardPacking

        return {
            normalize_code(code): standard
            for code, standard in StandardPacking.objects.values_list('item_code', 'standard')
            if standard and standard > 0
        }

    def standard_for(self, item_code: str) -> int | None:
        if self._cache is None:
            with self._lock:
                if self._cache is None:
                    self._cache = self._load()
                    logger.debug("Loaded %d standard packing entries", len(self._cache))
        return self._cache.get(normalize_code(item_code))

    def invalidate(self) -> None:
        with self._lock:
            self._cache = None


# Cached source instance
_lock = threading.Lock()
_packing_source: PackingSource | None = None


def get_packing_source() -> PackingSource:
    """
    Return the configured packing source.

    Raises:
        ImproperlyConfigured: If PACKING_SOURCE is empty or import fails
    """
    global _packing_source

    if _packing_source is None:
        with _lock:
            if _packing_source is None:  # double-checked
                source_path = lotman_settings.PACKING_SOURCE

                if not source_path:
                    raise ImproperlyConfigured(
                        "LOTMAN['PACKING_SOURCE'] must be configured. "
                        "Example: 'lotman.adapters.catalog.CatalogPackingSource'"
                    )

                try:
                    source_class = import_string(source_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import packing source '{source_path}': {e}"
                    ) from e
                _packing_source = source_class()
                logger.debug("Loaded packing source: %s", source_path)

    return _packing_source


def reset_packing_source() -> None:
    """Reset the cached source. Useful for testing and after catalogue edits."""
    global _packing_source
    with _lock:
        _packing_source = None
