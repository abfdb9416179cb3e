"""
Ledger services — modular organization of allocation and ledger operations.

Re-exports the public pieces:
    from lotman.services import LedgerQueries, LedgerReservations, LedgerReversals
"""

from lotman.services.allocation import allocate, check_sufficiency, require_sufficient
from lotman.services.consolidation import LedgerConsolidation, merge_lots
from lotman.services.demand import ShipmentDemand, aggregate_demand
from lotman.services.lots import LedgerQueries
from lotman.services.reservation import LedgerReservations
from lotman.services.reversal import LedgerReversals, ReversalResult

__all__ = [
    'LedgerQueries',
    'ShipmentDemand',
    'LedgerReservations',
    'LedgerReversals',
    'ReversalResult',
    'LedgerConsolidation',
    'allocate',
    'aggregate_demand',
    'check_sufficiency',
    'require_sufficient',
    'merge_lots',
]
