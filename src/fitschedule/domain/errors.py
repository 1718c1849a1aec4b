"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class InvalidTransitionError(ValidationError):
    """Event status change out of a terminal state."""


class RecurrenceLimitError(DomainError):
    """Recurrence expansion walked past its date ceiling."""


def member_not_found(member_id: str) -> str:
    """Return message for missing member."""
    return f"Member {member_id} not found"


def group_not_found(group_id: str) -> str:
    """Return message for missing group."""
    return f"Group {group_id} not found"


def event_not_found(event_id: str) -> str:
    """Return message for missing event."""
    return f"Event {event_id} not found"


def series_not_found(series_id: str) -> str:
    """Return message for missing series."""
    return f"Series {series_id} not found"


def session_not_found(session_id: str) -> str:
    """Return message for missing session batch."""
    return f"Session {session_id} not found"


def invalid_transition(event_id: str, current: str, target: str) -> str:
    """Return message for a status change out of a terminal state."""
    return f"Event {event_id} is already {current} and cannot be marked {target}"
