"""
Exception types for the airport operations core.

Every failure surfaced by the services derives from AirportOpsError so the
presentation layer can render any of them with a single handler.
"""

from typing import Any, Optional


class AirportOpsError(Exception):
    """Base class for all airport operations failures."""
    pass


class NotFoundError(AirportOpsError):
    """A flight, aircraft, booking, airport or pricing rule does not exist."""

    def __init__(self, entity: str, key: Any, message: Optional[str] = None):
        self.entity = entity
        self.key = key
        super().__init__(message or f"{entity} not found: {key}")


class InvalidStateTransitionError(AirportOpsError):
    """The requested transition is not allowed from the current status."""
    pass


class ResourceExhaustedError(AirportOpsError):
    """No seats remain in the requested class."""
    pass


class PermissionDeniedError(AirportOpsError):
    """No admin session, or the session's role lacks the capability."""
    pass


class AuthenticationError(PermissionDeniedError):
    """Invalid username or password."""
    pass


class PersistenceError(AirportOpsError):
    """Loading, saving or backing up the document store failed."""
    pass
