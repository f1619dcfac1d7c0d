"""Tests for the PurchaseIntent encoding contract.

Covers:
- Payload validation (kind, amount, buyerEmail, eventId for event fees)
- Metadata encoding (every key present, optional fields as "")
- Metadata decoding (version check, missing keys, re-validation)
"""

from decimal import Decimal

import pytest

from clubsphere.errors import InvalidPurchaseIntent
from clubsphere.services.purchase_intent import (
    FIELDS,
    PurchaseIntent,
    parse_amount,
)


def _payload(**overrides):
    payload = {
        "kind": "membership",
        "clubId": "club-1",
        "clubName": "Chess Club",
        "amount": 25,
        "buyerEmail": "A@X.com",
        "buyerName": "Ava",
        "ownerEmail": "manager@club.test",
    }
    payload.update(overrides)
    return payload


class TestFromPayload:
    """Building an intent from a create-checkout-session body."""

    def test_valid_membership(self):
        intent = PurchaseIntent.from_payload(_payload())
        assert intent.kind == "membership"
        assert intent.amount == Decimal("25.00")
        assert intent.amount_minor_units == 2500
        assert intent.buyer_email == "a@x.com"
        assert intent.event_id == ""

    def test_valid_event_fee(self):
        intent = PurchaseIntent.from_payload(
            _payload(kind="eventFee", eventId="evt-1", eventTitle="Open", amount="12.50")
        )
        assert intent.event_id == "evt-1"
        assert intent.amount_minor_units == 1250
        assert intent.product_name == "Open"

    @pytest.mark.parametrize("amount", [0, -5, "0.00", None, "", "abc", "1.005", "NaN", True])
    def test_rejects_bad_amount(self, amount):
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_payload(_payload(amount=amount))
        assert exc_info.value.field == "amount"
        assert exc_info.value.status_code == 400

    def test_rejects_missing_buyer_email(self):
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_payload(_payload(buyerEmail=""))
        assert exc_info.value.field == "buyerEmail"

    def test_rejects_unknown_kind(self):
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_payload(_payload(kind="donation"))
        assert exc_info.value.field == "kind"

    def test_event_fee_requires_event_id(self):
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_payload(_payload(kind="eventFee"))
        assert exc_info.value.field == "eventId"

    def test_rejects_non_object_body(self):
        with pytest.raises(InvalidPurchaseIntent):
            PurchaseIntent.from_payload(["not", "a", "dict"])

    def test_parse_amount_normalises_to_cents(self):
        assert parse_amount("7.5") == Decimal("7.50")
        assert parse_amount(3) == Decimal("3.00")


class TestMetadataEncoding:
    """Encoding to and decoding from Stripe session metadata."""

    def test_every_key_present_and_stringified(self):
        metadata = PurchaseIntent.from_payload(_payload()).to_metadata()
        assert metadata["intentVersion"] == "1"
        for key, _ in FIELDS:
            assert key in metadata
            assert isinstance(metadata[key], str)
        assert metadata["eventId"] == ""
        assert metadata["bannerImage"] == ""
        assert metadata["amount"] == "25.00"

    def test_decode_restores_intent(self):
        original = PurchaseIntent.from_payload(
            _payload(kind="eventFee", eventId="evt-9", eventTitle="Blitz", amount="9.99")
        )
        decoded = PurchaseIntent.from_metadata(original.to_metadata())
        assert decoded == original

    def test_decode_rejects_foreign_metadata(self):
        """Metadata without our version marker was not written by us."""
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_metadata({"kind": "membership"})
        assert exc_info.value.field == "intentVersion"

    def test_decode_rejects_missing_keys(self):
        metadata = PurchaseIntent.from_payload(_payload()).to_metadata()
        del metadata["ownerEmail"]
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            PurchaseIntent.from_metadata(metadata)
        assert exc_info.value.field == "ownerEmail"

    def test_decode_revalidates(self):
        metadata = PurchaseIntent.from_payload(_payload()).to_metadata()
        metadata["amount"] = "0"
        with pytest.raises(InvalidPurchaseIntent):
            PurchaseIntent.from_metadata(metadata)

    def test_overlong_value_rejected(self):
        intent = PurchaseIntent.from_payload(_payload(description="x" * 501))
        with pytest.raises(InvalidPurchaseIntent) as exc_info:
            intent.to_metadata()
        assert exc_info.value.field == "description"
