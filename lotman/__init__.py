"""
Django Lotman — FIFO lot allocation and export ledger.

Usage:
    from lotman import ledger, LedgerError

    demand = ledger.shipment_demand('SHIP-0412')
    result = ledger.allocate(demand)
    committed = ledger.reserve(result.selected(), shipment='SHIP-0412', actor='kho01')
    ledger.reverse(committed[0])
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from lotman.service import Ledger
        return Ledger
    elif name == 'LedgerError':
        from lotman.exceptions import LedgerError
        return LedgerError
    elif name == 'Lot':
        from lotman.models.lot import Lot
        return Lot
    elif name == 'ExportRecord':
        from lotman.models.export import ExportRecord
        return ExportRecord
    elif name == 'OutboundRecord':
        from lotman.models.outbound import OutboundRecord
        return OutboundRecord
    elif name == 'ShipmentLine':
        from lotman.models.shipment import ShipmentLine
        return ShipmentLine
    elif name == 'StandardPacking':
        from lotman.models.packing import StandardPacking
        return StandardPacking
    elif name == 'ShipmentStatus':
        from lotman.models.enums import ShipmentStatus
        return ShipmentStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'Lot',
    'ExportRecord',
    'OutboundRecord',
    'ShipmentLine',
    'StandardPacking',
    'ShipmentStatus',
]

__version__ = '0.1.0'
