"""
FIFO allocation — split demand across lots, oldest batch first.

Pure computation over a lot snapshot: nothing here touches the database.
The same snapshot and demand always produce the same lines.

Usage:
    result = allocate({"B001003": 2000}, lots, factory="ASM1")
    result.lines       # [AllocationLine(lot=<2501>, quantity=1500), ...]
    result.shortages   # {} or {"B001003": 100}
"""

import logging
from typing import Iterable, Mapping

from lotman.exceptions import LedgerError
from lotman.fifo import sort_fifo
from lotman.matching import codes_match
from lotman.protocols.records import AllocationLine, AllocationResult, LotSnapshot
from lotman.services.demand import aggregate_demand

logger = logging.getLogger('lotman')


def _stock_key(lot: LotSnapshot):
    if lot.pk is not None:
        return ('pk', lot.pk)
    return ('obj', id(lot))


def candidate_lots(item_code: str, lots: Iterable[LotSnapshot],
                   factory: str | None = None) -> list[LotSnapshot]:
    """Lots matching `item_code` in the factory scope, oldest first."""
    return sort_fifo(
        lot for lot in lots
        if (factory is None or lot.factory == factory)
        and codes_match(item_code, lot.item_code)
    )


def allocate(demand: Mapping[str, int], lots: Iterable[LotSnapshot],
             factory: str | None = None) -> AllocationResult:
    """
    Greedy FIFO allocation of demand across lots.

    Demand keys are normalized first; keys that differ only in case or
    spacing are summed into one entry.

    For each demand entry (in the mapping's order), walk the matching
    lots oldest-first and take min(remaining demand, stock left in lot).
    Stock taken for one entry is not offered again to the next, so a lot
    matched by two demand codes is never over-allocated.

    Shortages are reported, not raised: the partial lines are returned
    alongside `shortages[item_code] = uncovered quantity`.

    Guarantees:
        allocated_for(X) + shortages.get(X, 0) == demand[X]
        every line.quantity <= its lot's on_hand in the snapshot
    """
    lots = list(lots)
    result = AllocationResult()
    remaining_stock: dict = {}

    for code, required in aggregate_demand(demand.items()).items():
        remaining = required
        for lot in candidate_lots(code, lots, factory):
            if remaining == 0:
                break

            key = _stock_key(lot)
            available = remaining_stock.get(key, lot.on_hand)
            taken = min(remaining, available)
            if taken <= 0:
                continue

            result.lines.append(AllocationLine(lot=lot, quantity=taken, demand_code=code))
            remaining_stock[key] = available - taken
            remaining -= taken

        if remaining > 0:
            result.shortages[code] = remaining
            logger.info(
                "ledger.allocate.shortage",
                extra={
                    "item_code": code,
                    "factory": factory,
                    "required": required,
                    "missing": remaining,
                },
            )

    return result


def check_sufficiency(demand: Mapping[str, int], lots: Iterable[LotSnapshot],
                      factory: str | None = None) -> dict[str, int]:
    """Shortages only: what allocation would leave uncovered."""
    return allocate(demand, lots, factory).shortages


def require_sufficient(result: AllocationResult) -> AllocationResult:
    """
    Block approval of a short allocation.

    Raises:
        LedgerError('INSUFFICIENT_STOCK'): listing every short item
    """
    if result.has_shortage:
        raise LedgerError(
            'INSUFFICIENT_STOCK',
            shortages=dict(result.shortages),
            allocated={
                code: result.allocated_for(code) for code in result.shortages
            },
        )
    return result
