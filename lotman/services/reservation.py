"""
Reservations — commit an approved allocation to the ledger.

Each allocation line is applied in its own transaction.atomic() with the
lot row locked:

    1. OutboundRecord created (approved=False)
    2. Lot.on_hand decremented, Lot.exported incremented
    3. ExportRecord created
    4. OutboundRecord marked approved

Lines are applied one after another. If a line fails, earlier lines stay
committed and the error carries their pks in data['committed'].
"""

import logging
from collections import defaultdict
from datetime import datetime

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from lotman.adapters.catalog import get_packing_source
from lotman.conf import lotman_settings
from lotman.exceptions import LedgerError
from lotman.models.export import ExportRecord
from lotman.models.lot import Lot
from lotman.models.outbound import OutboundRecord
from lotman.protocols.records import AllocationLine, LotSnapshot

logger = logging.getLogger('lotman')


def make_push_no(now: datetime | None = None) -> str:
    """Push number: DDMMHHmm of the local time."""
    now = timezone.localtime(now or timezone.now())
    return now.strftime('%d%m%H%M')


def packaging_for(quantity: int, standard: int | None) -> tuple[int, int]:
    """(carton, odd) for a quantity; (0, 0) without a usable standard."""
    if not standard or standard <= 0:
        return 0, 0
    return divmod(quantity, standard)


def _describe(line: AllocationLine) -> dict:
    return {
        **line.identity._asdict(),
        'lot_pk': line.lot.pk,
        'quantity': line.quantity,
    }


def _resolve_factory(lines, factory: str | None) -> str:
    """
    Factory scope of a set of lines.

    Raises:
        LedgerError('FACTORY_MISMATCH'): Lines span several factories, or
            disagree with the factory passed in
    """
    factories = {line.lot.factory or lotman_settings.DEFAULT_FACTORY for line in lines}
    if len(factories) > 1:
        raise LedgerError('FACTORY_MISMATCH', factories=sorted(factories))
    (line_factory,) = factories
    if factory is not None and factory != line_factory:
        raise LedgerError('FACTORY_MISMATCH', factories=[line_factory], requested=factory)
    return line_factory


def _lot_queryset(snapshot: LotSnapshot, factory: str, lock: bool = False):
    qs = Lot.objects.select_for_update() if lock else Lot.objects.all()
    if snapshot.pk is not None:
        return qs.filter(pk=snapshot.pk, factory=factory)
    return qs.filter(**{**snapshot.identity.as_filter(), 'factory': factory}).order_by('pk')


def _apply_ledger(record: OutboundRecord, lot: Lot, actor: str, now: datetime) -> ExportRecord:
    """Decrement the lot, write the export entry, flip the flag. Caller holds the lock."""
    Lot.objects.filter(pk=lot.pk).update(
        on_hand=F('on_hand') - record.quantity,
        exported=F('exported') + record.quantity,
        updated_at=now,
    )
    export = ExportRecord.objects.create(
        factory=record.factory,
        item_code=record.item_code,
        batch_number=record.batch_number,
        production_order=record.production_order,
        lot_ref=record.lot_ref,
        shipment=record.shipment,
        push_no=record.push_no,
        quantity=record.quantity,
        lot=lot,
        outbound=record,
        approved_by=actor,
        approved_at=now,
    )
    record.approved = True
    record.approved_by = actor
    record.approved_at = now
    record.lot = lot
    record.save(update_fields=['approved', 'approved_by', 'approved_at', 'lot', 'updated_at'])
    return export


class LedgerReservations:
    """Reservation (approval) methods."""

    @classmethod
    def reserve(cls, lines, shipment, factory=None, actor='', push_no=None,
                customer_code='', notes='', packing=None):
        """
        Apply the selected allocation lines to the ledger.

        Only lines with selected=True take part. `packing` overrides the
        configured PackingSource.

        Returns:
            List of approved OutboundRecord, one per selected line

        Raises:
            LedgerError('EMPTY_SELECTION'): No line selected
            LedgerError('INVALID_QUANTITY'): A selected line has quantity <= 0
            LedgerError('FACTORY_MISMATCH'): Lines from several factories, or
                from another factory than `factory`
            LedgerError('STALE_ALLOCATION'): A lot has less on hand than its
                lines need. From the pre-check: nothing was written. From a
                line: data['committed'] lists lines already applied.
            LedgerError('WRITE_FAILURE'): The store rejected a write; same
                data['committed'] / data['line'] context.
        """
        selected = [line for line in lines if line.selected]
        if not selected:
            raise LedgerError('EMPTY_SELECTION', shipment=shipment)

        for line in selected:
            if line.quantity <= 0:
                raise LedgerError('INVALID_QUANTITY', requested=line.quantity, line=_describe(line))

        factory = _resolve_factory(selected, factory)
        shipment = shipment.strip()
        push_no = push_no or make_push_no()

        cls._precheck(selected, factory, shipment)

        committed: list[OutboundRecord] = []
        for line in selected:
            try:
                record = cls._reserve_line(
                    line, shipment, factory, actor, push_no, customer_code, notes, packing
                )
            except LedgerError as exc:
                exc.data.setdefault('line', _describe(line))
                exc.data['committed'] = [r.pk for r in committed]
                exc.data['shipment'] = shipment
                logger.error(
                    "ledger.reserve.aborted",
                    extra={"shipment": shipment, "code": exc.code,
                           "committed": len(committed), **_describe(line)},
                )
                raise
            except DatabaseError as exc:
                logger.error(
                    "ledger.reserve.write_failure",
                    extra={"shipment": shipment, "committed": len(committed),
                           "error": str(exc), **_describe(line)},
                )
                raise LedgerError(
                    'WRITE_FAILURE',
                    line=_describe(line),
                    committed=[r.pk for r in committed],
                    shipment=shipment,
                    error=str(exc),
                ) from exc
            committed.append(record)

        logger.info(
            "ledger.reserve.done",
            extra={
                "shipment": shipment,
                "factory": factory,
                "push_no": push_no,
                "lines": len(committed),
                "qty": sum(r.quantity for r in committed),
            },
        )
        return committed

    @classmethod
    def _precheck(cls, selected, factory, shipment):
        """
        Reject the whole selection if any lot moved since the preview.

        Lines drawing on the same lot are summed first.
        """
        needed: dict = defaultdict(int)
        lines_by_lot: dict = defaultdict(list)
        for line in selected:
            key = line.lot.pk if line.lot.pk is not None else line.identity
            needed[key] += line.quantity
            lines_by_lot[key].append(line)

        stale = []
        for key, quantity in needed.items():
            snapshot = lines_by_lot[key][0].lot
            lot = _lot_queryset(snapshot, factory).first()
            available = lot.on_hand if lot is not None else 0
            if available < quantity:
                stale.append({
                    **snapshot.identity._asdict(),
                    'lot_pk': snapshot.pk,
                    'requested': quantity,
                    'available': available,
                })

        if stale:
            logger.warning(
                "ledger.reserve.stale",
                extra={"shipment": shipment, "factory": factory, "lots": len(stale)},
            )
            raise LedgerError(
                'STALE_ALLOCATION',
                shipment=shipment,
                stale=stale,
                line=stale[0],
                committed=[],
            )

    @classmethod
    def _reserve_line(cls, line, shipment, factory, actor, push_no, customer_code, notes,
                      packing=None):
        with transaction.atomic():
            lot = _lot_queryset(line.lot, factory, lock=True).first()
            available = lot.on_hand if lot is not None else 0
            if available < line.quantity:
                raise LedgerError(
                    'STALE_ALLOCATION',
                    requested=line.quantity,
                    available=available,
                )

            standard = (packing or get_packing_source()).standard_for(lot.item_code) or 0
            carton, odd = packaging_for(line.quantity, standard)
            now = timezone.now()

            record = OutboundRecord.objects.create(
                factory=factory,
                shipment=shipment,
                customer_code=customer_code,
                item_code=lot.item_code,
                batch_number=lot.batch_number,
                production_order=lot.production_order,
                lot_ref=lot.lot_ref,
                location=lot.location,
                quantity=line.quantity,
                standard=standard,
                carton=carton,
                odd=odd,
                push_no=push_no,
                notes=line.notes or notes,
                lot=lot,
                approved=False,
                export_date=now,
            )
            _apply_ledger(record, lot, actor, now)

        logger.info(
            "ledger.reserve.line",
            extra={
                "shipment": shipment,
                "outbound_id": record.pk,
                "carton": carton,
                "odd": odd,
                **_describe(line),
            },
        )
        return record

    @classmethod
    def draft(cls, line, shipment, factory=None, push_no=None, customer_code='', notes='',
              packing=None):
        """
        Create an unapproved OutboundRecord for a line, without touching stock.

        Approve it later with approve().
        """
        if line.quantity <= 0:
            raise LedgerError('INVALID_QUANTITY', requested=line.quantity, line=_describe(line))

        factory = _resolve_factory([line], factory)
        standard = (packing or get_packing_source()).standard_for(line.item_code) or 0
        carton, odd = packaging_for(line.quantity, standard)

        record = OutboundRecord.objects.create(
            factory=factory,
            shipment=shipment.strip(),
            customer_code=customer_code,
            item_code=line.lot.item_code,
            batch_number=line.lot.batch_number,
            production_order=line.lot.production_order,
            lot_ref=line.lot.lot_ref,
            location=line.lot.location,
            quantity=line.quantity,
            standard=standard,
            carton=carton,
            odd=odd,
            push_no=push_no or make_push_no(),
            notes=line.notes or notes,
            lot_id=line.lot.pk,
            approved=False,
        )
        logger.info(
            "ledger.outbound.drafted",
            extra={"outbound_id": record.pk, "shipment": record.shipment, **_describe(line)},
        )
        return record

    @classmethod
    def approve(cls, record, actor=''):
        """
        Apply the ledger effect of an unapproved OutboundRecord.

        Raises:
            LedgerError('RECORD_NOT_FOUND'): Record doesn't exist
            LedgerError('INVALID_STATUS'): Record already approved
            LedgerError('STALE_ALLOCATION'): Lot missing or short
        """
        pk = getattr(record, 'pk', record)

        with transaction.atomic():
            try:
                outbound = OutboundRecord.objects.select_for_update().get(pk=pk)
            except OutboundRecord.DoesNotExist:
                raise LedgerError('RECORD_NOT_FOUND', outbound_id=pk) from None

            if outbound.approved:
                raise LedgerError('INVALID_STATUS', outbound_id=pk, current='approved')

            lots = Lot.objects.select_for_update()
            if outbound.lot_id is not None:
                lot = lots.filter(pk=outbound.lot_id).first()
            else:
                lot = lots.with_identity(outbound.identity).order_by('pk').first()

            available = lot.on_hand if lot is not None else 0
            if available < outbound.quantity:
                raise LedgerError(
                    'STALE_ALLOCATION',
                    outbound_id=pk,
                    requested=outbound.quantity,
                    available=available,
                    line={**outbound.identity._asdict(), 'shipment': outbound.shipment},
                )

            _apply_ledger(outbound, lot, actor, timezone.now())

        logger.info(
            "ledger.outbound.approved",
            extra={"outbound_id": pk, "qty": outbound.quantity, "actor": actor},
        )
        return outbound

    @classmethod
    def edit_quantity(cls, record, quantity):
        """
        Change the quantity of an unapproved OutboundRecord.

        Packaging numbers are recomputed from the record's standard.

        Raises:
            LedgerError('INVALID_QUANTITY'): quantity <= 0
            LedgerError('INVALID_STATUS'): Record is approved
        """
        if quantity <= 0:
            raise LedgerError('INVALID_QUANTITY', requested=quantity)

        pk = getattr(record, 'pk', record)
        with transaction.atomic():
            try:
                outbound = OutboundRecord.objects.select_for_update().get(pk=pk)
            except OutboundRecord.DoesNotExist:
                raise LedgerError('RECORD_NOT_FOUND', outbound_id=pk) from None

            if outbound.approved:
                raise LedgerError('INVALID_STATUS', outbound_id=pk, current='approved')

            outbound.quantity = quantity
            outbound.carton, outbound.odd = packaging_for(quantity, outbound.standard)
            outbound.save(update_fields=['quantity', 'carton', 'odd', 'updated_at'])
        return outbound
