"""
Reversals — undo an approved OutboundRecord.

Inside one transaction.atomic():

    1. Lock the OutboundRecord (must be approved)
    2. Find and delete the mirroring ExportRecord
    3. Give the quantity back to the lot
    4. Mark the OutboundRecord unapproved

Without a matching ExportRecord the lot is not touched at all; what
happens to the record is decided by MISSING_EXPORT_POLICY.
"""

import logging
from dataclasses import dataclass

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from lotman.conf import lotman_settings
from lotman.exceptions import LedgerError
from lotman.models.enums import ReversalStatus
from lotman.models.export import ExportRecord
from lotman.models.lot import Lot
from lotman.models.outbound import OutboundRecord

logger = logging.getLogger('lotman')

POLICIES = ('keep', 'release', 'raise')


@dataclass(frozen=True)
class ReversalResult:
    """Outcome of one reversal."""

    status: str
    outbound_id: int
    quantity: int
    lot_id: int | None = None

    @property
    def reversed(self) -> bool:
        return self.status == ReversalStatus.REVERSED


def _find_export(outbound: OutboundRecord) -> ExportRecord | None:
    """
    Export entry mirroring `outbound`.

    Prefers the entry linked to this record; otherwise the oldest
    unlinked entry with the same key and quantity.
    """
    candidates = ExportRecord.objects.select_for_update().filter(**outbound.export_key())
    linked = candidates.filter(outbound=outbound).order_by('pk').first()
    if linked is not None:
        return linked
    return (
        candidates.filter(outbound__isnull=True, quantity=outbound.quantity)
        .order_by('pk')
        .first()
    )


def _unapprove(outbound: OutboundRecord) -> None:
    outbound.approved = False
    outbound.approved_by = ''
    outbound.approved_at = None
    outbound.save(update_fields=['approved', 'approved_by', 'approved_at', 'updated_at'])


class LedgerReversals:
    """Reversal (un-approval) methods."""

    @classmethod
    def reverse(cls, record, actor='', policy=None) -> ReversalResult:
        """
        Reverse an approved OutboundRecord.

        Args:
            record: OutboundRecord or its pk
            actor: Who requested the reversal (logged)
            policy: Override MISSING_EXPORT_POLICY for this call

        Returns:
            ReversalResult with status REVERSED, MISSING_EXPORT or
            RELEASED_WITHOUT_EXPORT

        Raises:
            LedgerError('RECORD_NOT_FOUND'): No such record
            LedgerError('INVALID_STATUS'): Record is not approved
            LedgerError('MISSING_LEDGER_ENTRY'): No export entry and policy "raise"
        """
        policy = policy or lotman_settings.MISSING_EXPORT_POLICY
        if policy not in POLICIES:
            raise ImproperlyConfigured(
                f"LOTMAN['MISSING_EXPORT_POLICY'] must be one of {POLICIES}, got {policy!r}"
            )

        pk = getattr(record, 'pk', record)

        with transaction.atomic():
            try:
                outbound = OutboundRecord.objects.select_for_update().get(pk=pk)
            except OutboundRecord.DoesNotExist:
                raise LedgerError('RECORD_NOT_FOUND', outbound_id=pk) from None

            if not outbound.approved:
                raise LedgerError('INVALID_STATUS', outbound_id=pk, current='pending')

            export = _find_export(outbound)
            if export is None:
                return cls._missing_export(outbound, policy, actor)

            quantity = export.quantity
            lot_id = export.lot_id or outbound.lot_id
            export.delete()

            lots = Lot.objects.select_for_update()
            if lot_id is not None:
                lot = lots.filter(pk=lot_id).first()
            else:
                lot = lots.with_identity(outbound.identity).order_by('pk').first()

            if lot is None:
                logger.warning(
                    "ledger.reverse.missing_lot",
                    extra={"outbound_id": pk, "qty": quantity, **outbound.identity._asdict()},
                )
            else:
                Lot.objects.filter(pk=lot.pk).update(
                    on_hand=F('on_hand') + quantity,
                    exported=Greatest(F('exported') - quantity, Value(0)),
                    updated_at=timezone.now(),
                )

            _unapprove(outbound)

        logger.info(
            "ledger.reverse.done",
            extra={
                "outbound_id": pk,
                "shipment": outbound.shipment,
                "qty": quantity,
                "lot_id": lot.pk if lot is not None else None,
                "actor": actor,
            },
        )
        return ReversalResult(
            status=ReversalStatus.REVERSED,
            outbound_id=pk,
            quantity=quantity,
            lot_id=lot.pk if lot is not None else None,
        )

    @classmethod
    def _missing_export(cls, outbound, policy, actor) -> ReversalResult:
        logger.warning(
            "ledger.reverse.missing_export",
            extra={
                "outbound_id": outbound.pk,
                "shipment": outbound.shipment,
                "push_no": outbound.push_no,
                "policy": policy,
                "actor": actor,
                **outbound.identity._asdict(),
            },
        )
        if policy == 'raise':
            raise LedgerError(
                'MISSING_LEDGER_ENTRY',
                outbound_id=outbound.pk,
                shipment=outbound.shipment,
                push_no=outbound.push_no,
            )
        if policy == 'release':
            _unapprove(outbound)
            status = ReversalStatus.RELEASED_WITHOUT_EXPORT
        else:
            status = ReversalStatus.MISSING_EXPORT

        return ReversalResult(
            status=status,
            outbound_id=outbound.pk,
            quantity=outbound.quantity,
            lot_id=outbound.lot_id,
        )

    @classmethod
    def reverse_many(cls, records, actor='', policy=None) -> list[ReversalResult]:
        """Reverse several records, each in its own transaction."""
        return [cls.reverse(record, actor=actor, policy=policy) for record in records]
