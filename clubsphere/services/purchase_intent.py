"""Purchase intent — what the buyer is paying for, and how it travels.

A PurchaseIntent is never persisted by us. It is encoded into the Stripe
Checkout Session metadata when the session is created and decoded back
from that metadata when the payment is confirmed, so the metadata is the
authoritative copy. The encoding is explicit:

    metadata key     attribute       required
    ------------     ---------       --------
    intentVersion    (constant "1")  yes
    kind             kind            yes  (membership | eventFee)
    clubId           club_id         yes
    eventId          event_id        when kind == eventFee
    clubName         club_name       no
    eventTitle       event_title     no
    description      description     no
    bannerImage      banner_image    no
    amount           amount          yes  (major units, "25.00", > 0)
    buyerEmail       buyer_email     yes
    buyerName        buyer_name      no
    ownerEmail       owner_email     no

Every key is always written. Absent optional values are written as "" so
a missing key on decode means the metadata was not produced by us.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from clubsphere.errors import InvalidPurchaseIntent

INTENT_VERSION = "1"

KIND_MEMBERSHIP = "membership"
KIND_EVENT_FEE = "eventFee"
KINDS = (KIND_MEMBERSHIP, KIND_EVENT_FEE)

# Stripe rejects metadata values longer than this
METADATA_VALUE_LIMIT = 500

CENT = Decimal("0.01")

# (metadata key, attribute) in encoding order
FIELDS = [
    ("kind", "kind"),
    ("clubId", "club_id"),
    ("eventId", "event_id"),
    ("clubName", "club_name"),
    ("eventTitle", "event_title"),
    ("description", "description"),
    ("bannerImage", "banner_image"),
    ("amount", "amount"),
    ("buyerEmail", "buyer_email"),
    ("buyerName", "buyer_name"),
    ("ownerEmail", "owner_email"),
]


def parse_amount(value):
    """Parse a major-unit amount into a Decimal with at most 2 places.

    Raises InvalidPurchaseIntent for anything that isn't a positive,
    finite, cent-precise number.
    """
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidPurchaseIntent("amount is required", field="amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidPurchaseIntent(f"amount is not a number: {value!r}", field="amount")
    if not amount.is_finite():
        raise InvalidPurchaseIntent("amount must be finite", field="amount")
    if amount <= 0:
        raise InvalidPurchaseIntent("amount must be greater than zero", field="amount")
    if amount != amount.quantize(CENT):
        raise InvalidPurchaseIntent("amount has sub-cent precision", field="amount")
    return amount.quantize(CENT)


def _clean(value):
    if value is None:
        return ""
    return str(value).strip()


@dataclass
class PurchaseIntent:
    kind: str
    club_id: str
    amount: Decimal
    buyer_email: str
    event_id: str = ""
    club_name: str = ""
    event_title: str = ""
    description: str = ""
    banner_image: str = ""
    buyer_name: str = ""
    owner_email: str = ""

    @property
    def amount_minor_units(self):
        return int(self.amount * 100)

    @property
    def product_name(self):
        """Line item title shown on the Stripe hosted page."""
        if self.kind == KIND_MEMBERSHIP:
            return self.club_name or "Club membership"
        return self.event_title or "Event registration"

    def validate(self):
        """Check the invariants. Returns self so calls can be chained."""
        if self.kind not in KINDS:
            raise InvalidPurchaseIntent(
                f"kind must be one of {', '.join(KINDS)}", field="kind"
            )
        if not self.club_id:
            raise InvalidPurchaseIntent("clubId is required", field="clubId")
        if self.kind == KIND_EVENT_FEE and not self.event_id:
            raise InvalidPurchaseIntent(
                "eventId is required for event fees", field="eventId"
            )
        self.amount = parse_amount(self.amount)
        if not self.buyer_email:
            raise InvalidPurchaseIntent("buyerEmail is required", field="buyerEmail")
        return self

    # ── Encoding ──

    def to_metadata(self):
        """Encode as Stripe metadata: every key present, every value a str."""
        metadata = {"intentVersion": INTENT_VERSION}
        for key, attr in FIELDS:
            value = getattr(self, attr)
            if attr == "amount":
                value = f"{value:.2f}"
            value = _clean(value)
            if len(value) > METADATA_VALUE_LIMIT:
                raise InvalidPurchaseIntent(
                    f"{key} exceeds {METADATA_VALUE_LIMIT} characters", field=key
                )
            metadata[key] = value
        return metadata

    @classmethod
    def from_metadata(cls, metadata):
        """Decode metadata written by to_metadata(). Validates on the way out."""
        metadata = dict(metadata or {})
        version = metadata.get("intentVersion")
        if version != INTENT_VERSION:
            raise InvalidPurchaseIntent(
                f"unsupported intent encoding version: {version!r}",
                field="intentVersion",
            )
        missing = [key for key, _ in FIELDS if key not in metadata]
        if missing:
            raise InvalidPurchaseIntent(
                f"metadata missing keys: {', '.join(missing)}", field=missing[0]
            )
        values = {attr: _clean(metadata[key]) for key, attr in FIELDS}
        values["buyer_email"] = values["buyer_email"].lower()
        values["owner_email"] = values["owner_email"].lower()
        return cls(**values).validate()

    @classmethod
    def from_payload(cls, data):
        """Build an intent from a create-checkout-session request body."""
        if not isinstance(data, dict):
            raise InvalidPurchaseIntent("request body must be a JSON object")
        values = {attr: _clean(data.get(key)) for key, attr in FIELDS}
        values["amount"] = data.get("amount")
        values["buyer_email"] = values["buyer_email"].lower()
        values["owner_email"] = values["owner_email"].lower()
        return cls(**values).validate()
