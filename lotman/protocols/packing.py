"""
Standard Packing Protocol — units-per-carton lookup.

Lotman defines this protocol; the product catalogue (or any other
source) implements it. Implementations own their caching and must drop
it on invalidate().
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PackingSource(Protocol):
    """Protocol for standard-packing lookup."""

    def standard_for(self, item_code: str) -> int | None:
        """
        Units per carton for an item.

        Args:
            item_code: Normalized item code

        Returns:
            Positive integer, or None when no standard is configured
        """
        ...

    def invalidate(self) -> None:
        """Forget cached values; the next lookup re-reads the source."""
        ...
