"""
Lotman configuration.

Usage in settings.py:
    LOTMAN = {
        "DEFAULT_FACTORY": "ASM1",
        "MIN_PREFIX_MATCH_LENGTH": 6,
        "WRITE_BATCH_SIZE": 500,
        "PACKING_SOURCE": "lotman.adapters.catalog.CatalogPackingSource",
        "MISSING_EXPORT_POLICY": "keep",
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class LotmanSettings:
    """Lotman configuration settings."""

    # Factory scope used when callers don't pass one
    DEFAULT_FACTORY: str = "ASM1"

    # Shortest code allowed to match a longer one by prefix
    MIN_PREFIX_MATCH_LENGTH: int = 6

    # Chunk size for batched deletes/updates (store write-batch cap)
    WRITE_BATCH_SIZE: int = 500

    # Shipment statuses that still carry open demand
    DEMAND_STATUSES: list[str] = field(
        default_factory=lambda: ["pending", "preparing"]
    )

    # Standard-packing backend (dotted path)
    PACKING_SOURCE: str = "lotman.adapters.catalog.CatalogPackingSource"

    # Reversal without a matching export entry: "keep", "release" or "raise"
    MISSING_EXPORT_POLICY: str = "keep"


def get_lotman_settings() -> LotmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LOTMAN", {})
    return LotmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in LotmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_lotman_settings(), name)


lotman_settings = _LazySettings()
