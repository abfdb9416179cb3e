"""
Lotman Models.

Core models for lot allocation and the export ledger:
- Lot: On-hand quantity per (item, batch, production order, lot)
- ExportRecord: Immutable ledger of quantities that left a lot
- OutboundRecord: Committed allocation line with its approval flag
- ShipmentLine: Shipment demand per item
- StandardPacking: Units-per-carton catalogue
"""

from lotman.models.enums import ReversalStatus, ShipmentStatus
from lotman.models.export import ExportRecord
from lotman.models.lot import Lot
from lotman.models.outbound import OutboundRecord
from lotman.models.packing import StandardPacking
from lotman.models.shipment import ShipmentLine

__all__ = [
    'ShipmentStatus',
    'ReversalStatus',
    'Lot',
    'ExportRecord',
    'OutboundRecord',
    'ShipmentLine',
    'StandardPacking',
]
