"""
Lotman Protocols.

Typed boundary records and interfaces for external collaborators.
"""

from lotman.protocols.packing import PackingSource
from lotman.protocols.records import (
    AllocationLine,
    AllocationResult,
    LotIdentity,
    LotSnapshot,
)

__all__ = [
    "AllocationLine",
    "AllocationResult",
    "LotIdentity",
    "LotSnapshot",
    "PackingSource",
]
