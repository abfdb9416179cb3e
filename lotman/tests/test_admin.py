"""
Tests for the admin reverse action.
"""

import pytest
from django.urls import reverse

from lotman import ledger
from lotman.models import OutboundRecord


pytestmark = pytest.mark.django_db


class TestOutboundAdmin:
    """Tests for OutboundRecordAdmin."""

    def test_changelist(self, admin_client, older_lot):
        ledger.reserve(ledger.allocate({'B001003': 10}).selected(), shipment='SHIP-0412')

        response = admin_client.get(reverse('admin:lotman_outboundrecord_changelist'))

        assert response.status_code == 200

    def test_reverse_action(self, admin_client, older_lot):
        record = ledger.reserve(ledger.allocate({'B001003': 10}).selected(), shipment='SHIP-0412')[0]

        admin_client.post(
            reverse('admin:lotman_outboundrecord_changelist'),
            {'action': 'reverse_records', '_selected_action': [record.pk]},
        )

        record.refresh_from_db()
        older_lot.refresh_from_db()
        assert not record.approved
        assert older_lot.on_hand == 1500
