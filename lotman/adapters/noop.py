"""
Noop Packing Source — stub adapter for development and testing.

Usage in settings.py:
    LOTMAN = {
        "PACKING_SOURCE": "lotman.adapters.noop.NoopPackingSource",
    }

Every lookup returns None, so carton and odd counts on outbound
records are always 0.
"""

from __future__ import annotations


class NoopPackingSource:
    """
    No-operation packing source.

    Implements the ``PackingSource`` protocol without touching the
    database, for environments that have no packing catalogue.
    """

    def standard_for(self, item_code: str) -> int | None:
        return None

    def invalidate(self) -> None:
        pass
