"""Error types raised by the draft game services."""


class DraftGameError(Exception):
    """Base class for all draft game errors."""
    status_code = 500


class ValidationError(DraftGameError):
    """A rejected pick or request; the message is safe to show the player."""
    status_code = 400


class NotFoundError(DraftGameError):
    """A session token or share code that does not resolve."""
    status_code = 404


class StateError(DraftGameError):
    """An operation that is invalid for the session's current state."""
    status_code = 409


class ExhaustionError(DraftGameError):
    """Share code generation ran out of attempts."""
    status_code = 500


class CapacityError(DraftGameError):
    """More teams requested than the pool holds."""
    status_code = 500
