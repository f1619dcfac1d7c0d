# Models package — import all models here so Alembic can discover them.

from clubsphere.models.user import User  # noqa: F401
from clubsphere.models.club import Club, Event  # noqa: F401
from clubsphere.models.payment import LedgerEntry  # noqa: F401
from clubsphere.models.grant import MembershipGrant, RegistrationGrant  # noqa: F401
from clubsphere.models.stripe_event import StripeEvent  # noqa: F401
