"""
FIFO ordering — isolated, testable, reusable.

Batch codes encode when a lot was produced:
    - 8+ chars: WWMMSSSS (week, middle pair, 4-digit sequence)
    - 6-7 chars: WWSSSS   (week, 4-digit sequence; middle = 0)
    - shorter:  unparseable, sorts after everything else

Examples:
    parse_batch_key("05020003")  # BatchKey(week=5, middle=2, sequence=3)
    parse_batch_key("051234")    # BatchKey(week=5, middle=0, sequence=1234)
    parse_batch_key("2501")      # BatchKey(week=9999, middle=99, sequence=9999)

The same key is used to build allocation previews and to pick lots at
commit time, so two computations over one snapshot always agree.
"""

from typing import Iterable, NamedTuple, TypeVar


class BatchKey(NamedTuple):
    week: int
    middle: int
    sequence: int


UNPARSEABLE = BatchKey(9999, 99, 9999)

T = TypeVar('T')


def _number(fragment: str) -> int:
    if fragment.isascii() and fragment.isdigit():
        return int(fragment)
    return 0


def parse_batch_key(batch_number: str | None) -> BatchKey:
    """
    Turn a batch code into a sortable (week, middle, sequence) tuple.

    Never raises: non-numeric fragments count as 0 and codes shorter
    than 6 characters get the UNPARSEABLE sentinel.
    """
    batch = batch_number or ''
    if len(batch) < 6:
        return UNPARSEABLE

    week = _number(batch[0:2])
    if len(batch) >= 8:
        return BatchKey(week, _number(batch[2:4]), _number(batch[4:8]))
    return BatchKey(week, 0, _number(batch[2:6]))


def fifo_key(item_code: str | None, batch_number: str | None) -> tuple:
    """
    Sort key: item code (case-insensitive), then batch age, oldest first.

    The raw batch code is the last component so lots whose batch keys
    tie (e.g. two unparseable codes) still have a fixed order.
    """
    item = (item_code or '').strip().upper()
    batch = (batch_number or '').strip().upper()
    return (item, *parse_batch_key(batch_number), batch)


def compare_fifo(a: tuple[str, str], b: tuple[str, str]) -> int:
    """Three-way comparison over (item_code, batch_number) pairs."""
    key_a = fifo_key(*a)
    key_b = fifo_key(*b)
    return (key_a > key_b) - (key_a < key_b)


def sort_fifo(lots: Iterable[T]) -> list[T]:
    """
    Return lots ordered oldest-first.

    Works with anything exposing item_code, batch_number and (optionally)
    production_order / lot_ref attributes: model rows and snapshots alike.
    """
    return sorted(
        lots,
        key=lambda lot: (
            *fifo_key(lot.item_code, lot.batch_number),
            getattr(lot, 'production_order', '') or '',
            getattr(lot, 'lot_ref', '') or '',
        ),
    )
