"""
Typed records at the store boundary.

Documents coming from the lot store (or from imports) are untyped dicts.
They are converted here, once, and fail loudly when a required field is
missing instead of silently becoming zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, NamedTuple

from lotman.exceptions import LedgerError


class LotIdentity(NamedTuple):
    """Natural key of a lot within a factory scope."""

    factory: str
    item_code: str
    batch_number: str
    production_order: str
    lot_ref: str

    def as_filter(self) -> dict[str, str]:
        """Keyword arguments for an ORM equality filter."""
        return self._asdict()


REQUIRED_LOT_FIELDS = ('factory', 'item_code', 'on_hand')


def _text(doc: Mapping[str, Any], name: str) -> str:
    value = doc.get(name)
    return '' if value is None else str(value).strip()


def _integer(doc: Mapping[str, Any], name: str, default: int | None = None) -> int:
    value = doc.get(name)
    if value is None or value == '':
        if default is None:
            raise LedgerError('MISSING_FIELD', field=name, document=doc.get('pk'))
        return default
    if isinstance(value, bool):
        raise LedgerError('INVALID_FIELD', field=name, value=value)
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise LedgerError('INVALID_FIELD', field=name, value=value) from None
    # int() truncates floats and Decimals
    if isinstance(value, (float, Decimal)) and value != number:
        raise LedgerError('INVALID_FIELD', field=name, value=value)
    return number


@dataclass(frozen=True)
class LotSnapshot:
    """
    A lot as seen at one instant.

    `pk` links back to the stored row when the snapshot came from the
    database; pure computations (allocation, consolidation) never need it.
    """

    factory: str
    item_code: str
    batch_number: str
    production_order: str
    lot_ref: str
    on_hand: int
    location: str = ''
    exported: int = 0
    planned_export: int = 0
    opening_stock: int = 0
    import_date: datetime | None = None
    expiry_date: datetime | None = None
    notes: str = ''
    remarks: str = ''
    supplier: str = ''
    pk: int | None = None

    @property
    def identity(self) -> LotIdentity:
        return LotIdentity(
            self.factory, self.item_code, self.batch_number,
            self.production_order, self.lot_ref,
        )

    def with_on_hand(self, on_hand: int) -> LotSnapshot:
        return replace(self, on_hand=on_hand)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> LotSnapshot:
        """
        Build a snapshot from a store document.

        Raises:
            LedgerError('MISSING_FIELD'): factory, item_code or on_hand absent
            LedgerError('INVALID_FIELD'): a quantity is not an integer
        """
        for name in REQUIRED_LOT_FIELDS:
            if doc.get(name) is None or (name != 'on_hand' and not _text(doc, name)):
                raise LedgerError('MISSING_FIELD', field=name, document=doc.get('pk'))

        on_hand = _integer(doc, 'on_hand')
        if on_hand < 0:
            raise LedgerError('INVALID_FIELD', field='on_hand', value=on_hand)

        return cls(
            factory=_text(doc, 'factory'),
            item_code=_text(doc, 'item_code').upper(),
            batch_number=_text(doc, 'batch_number'),
            production_order=_text(doc, 'production_order'),
            lot_ref=_text(doc, 'lot_ref'),
            on_hand=on_hand,
            location=_text(doc, 'location'),
            exported=_integer(doc, 'exported', 0),
            planned_export=_integer(doc, 'planned_export', 0),
            opening_stock=_integer(doc, 'opening_stock', 0),
            import_date=doc.get('import_date'),
            expiry_date=doc.get('expiry_date'),
            notes=_text(doc, 'notes'),
            remarks=_text(doc, 'remarks'),
            supplier=_text(doc, 'supplier'),
            pk=doc.get('pk'),
        )


@dataclass(frozen=True)
class AllocationLine:
    """One lot's share of a demand, pending approval."""

    lot: LotSnapshot
    quantity: int
    demand_code: str = ''
    selected: bool = True
    notes: str = ''

    @property
    def item_code(self) -> str:
        return self.lot.item_code

    @property
    def identity(self) -> LotIdentity:
        return self.lot.identity

    def deselect(self) -> AllocationLine:
        return replace(self, selected=False)

    def with_quantity(self, quantity: int) -> AllocationLine:
        return replace(self, quantity=quantity)


@dataclass
class AllocationResult:
    """Lines produced by the allocator plus any uncovered demand."""

    lines: list[AllocationLine] = field(default_factory=list)
    shortages: dict[str, int] = field(default_factory=dict)

    @property
    def has_shortage(self) -> bool:
        return bool(self.shortages)

    def selected(self) -> list[AllocationLine]:
        return [line for line in self.lines if line.selected]

    def allocated_for(self, demand_code: str) -> int:
        """Total allocated against one demand entry."""
        return sum(
            line.quantity for line in self.lines
            if line.demand_code == demand_code
        )
