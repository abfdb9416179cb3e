"""
Shipment demand — collapse shipment lines into per-item quantities.

Usage:
    aggregate_demand([("b001003", 1200), ("B001003 ", 800), ("P030105", 0)])
    # {"B001003": 2000}
"""

import logging
from typing import Iterable

from lotman.conf import lotman_settings
from lotman.exceptions import LedgerError
from lotman.matching import normalize_code

logger = logging.getLogger('lotman')


def aggregate_demand(lines: Iterable[tuple[str, int]]) -> dict[str, int]:
    """
    Sum quantities per normalized item code.

    Lines with a blank code or a quantity <= 0 are dropped. Repeated
    codes are summed, never overwritten. Codes keep first-seen order.
    """
    demand: dict[str, int] = {}
    for item_code, quantity in lines:
        code = normalize_code(item_code)
        if not code or quantity is None:
            continue
        if isinstance(quantity, bool) or int(quantity) != quantity:
            raise LedgerError('INVALID_QUANTITY', item_code=code, requested=quantity)
        if quantity <= 0:
            continue
        demand[code] = demand.get(code, 0) + int(quantity)
    return demand


class ShipmentDemand:
    """Demand sourced from the shipment-demand collection."""

    @classmethod
    def lines_for(cls, shipment_code, factory=None, statuses=None):
        """Shipment lines that still carry open demand."""
        from lotman.models.shipment import ShipmentLine

        if statuses is None:
            statuses = lotman_settings.DEMAND_STATUSES

        qs = ShipmentLine.objects.filter(
            shipment_code=shipment_code.strip(),
            status__in=list(statuses),
        )
        if factory is not None:
            qs = qs.filter(factory=factory)
        return qs.order_by('pk')

    @classmethod
    def shipment_demand(cls, shipment_code, factory=None, statuses=None) -> dict[str, int]:
        """
        Per-item demand for a shipment.

        Recomputed on every call; demand has no lifecycle of its own.
        """
        lines = cls.lines_for(shipment_code, factory, statuses)
        demand = aggregate_demand(lines.values_list('item_code', 'quantity'))
        logger.info(
            "ledger.demand.loaded",
            extra={
                "shipment": shipment_code,
                "factory": factory,
                "items": len(demand),
                "total": sum(demand.values()),
            },
        )
        return demand
