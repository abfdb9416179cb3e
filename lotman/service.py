"""
Ledger Service — The single public interface for allocation and ledger operations.

Usage:
    from lotman import ledger, LedgerError

    demand = ledger.shipment_demand("SHIP-0412")        # {"B001003": 2000}
    result = ledger.allocate(demand)                    # preview, no writes
    records = ledger.reserve(result.selected(), shipment="SHIP-0412", actor="kho01")
    ledger.reverse(records[0], actor="kho01")
"""

from lotman.conf import lotman_settings
from lotman.protocols.records import AllocationResult
from lotman.services import allocation
from lotman.services.consolidation import LedgerConsolidation
from lotman.services.demand import ShipmentDemand
from lotman.services.lots import LedgerQueries
from lotman.services.reservation import LedgerReservations
from lotman.services.reversal import LedgerReversals


class Ledger(
    LedgerQueries,
    ShipmentDemand,
    LedgerReservations,
    LedgerReversals,
    LedgerConsolidation,
):
    """
    Single interface for all ledger operations.

    Read methods (lots_for, allocate, check_sufficiency) never write.
    State-changing methods (reserve, approve, reverse, consolidate) use
    atomic transactions with row locks. See each method's docstring.
    """

    @classmethod
    def allocate(cls, demand, factory=None) -> AllocationResult:
        """
        FIFO allocation preview for `demand` against current stock.

        Reads one snapshot of the matching lots, then allocates in memory.
        """
        factory = factory or lotman_settings.DEFAULT_FACTORY
        lots = cls.snapshot_for(demand.keys(), factory)
        return allocation.allocate(demand, lots, factory)

    @classmethod
    def check_sufficiency(cls, demand, factory=None) -> dict[str, int]:
        """Uncovered quantity per item code ({} when stock covers everything)."""
        return cls.allocate(demand, factory).shortages

    @classmethod
    def allocate_shipment(cls, shipment_code, factory=None) -> AllocationResult:
        """Allocation preview for a shipment's open demand."""
        demand = cls.shipment_demand(shipment_code, factory)
        return cls.allocate(demand, factory)
