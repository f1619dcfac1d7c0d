"""Error taxonomy for the payment confirmation pipeline.

Every exception carries the HTTP status the blueprint layer maps it to.
Provider (stripe.error.*) and store (sqlalchemy.exc.*) exceptions are
translated into these by the service layer and never reach a route.
"""


class ClubSphereError(Exception):
    """Base class. `message` is safe to log, not to show to end users."""

    status_code = 500

    def __init__(self, message, status_code=None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidPurchaseIntent(ClubSphereError):
    """Caller supplied an intent that can't be checked out (or decoded)."""

    status_code = 400

    def __init__(self, message, field=None):
        self.field = field
        super().__init__(message)


class SessionNotFound(ClubSphereError):
    """The Checkout Provider has no session with the given id."""

    status_code = 200


class DependencyUnavailable(ClubSphereError):
    """Store or Checkout Provider unreachable. Safe to retry."""

    status_code = 500

    def __init__(self, message, dependency=None):
        self.dependency = dependency
        super().__init__(message)


class DependencyTimeout(DependencyUnavailable):
    """A bounded store/provider timeout expired."""
