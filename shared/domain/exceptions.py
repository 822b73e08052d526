"""
Domain Error Taxonomy

Every rejection raised by the guesthouse domain derives from DomainError.
The classes carry a stable machine code and a message that can be shown to
a guest as-is; shared.api.exceptions maps them onto HTTP responses.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all expected business failures."""

    code = "error"
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed input: missing or unordered dates, bad guest count."""

    code = "invalid"
    default_message = "Invalid input."

    def __init__(self, message: str | None = None, *, errors: dict | None = None, code: str | None = None):
        super().__init__(message, code=code)
        self.errors = errors or {}


class InvalidDateRange(ValidationError):
    code = "invalid_date_range"
    default_message = "Check-out date must be after check-in date."


class NotFoundError(DomainError):
    code = "not_found"
    default_message = "Not found."


class CapacityError(DomainError):
    """
    The request is well formed but the room type cannot take it

    `rule` names the allocation rule that failed (inactive,
    capacity_exceeded, stay_length, blackout, no_capacity) so clients can
    show an actionable message.
    """

    code = "unavailable"
    default_message = "Room type is not available for the selected dates."

    def __init__(self, message: str | None = None, *, rule: str = "", code: str | None = None):
        super().__init__(message, code=code)
        self.rule = rule


class NoCapacity(CapacityError):
    code = "no_capacity"
    default_message = "No rooms of this type are available for the selected dates."

    def __init__(self, message: str | None = None):
        super().__init__(message, rule="no_capacity")


class ConflictError(DomainError):
    code = "conflict"
    default_message = "The request conflicts with the current state."


class UnitConflict(ConflictError):
    code = "unit_conflict"
    default_message = "The selected room is not available for the selected dates."


class InvalidTransition(ConflictError):
    code = "invalid_transition"
    default_message = "This status change is not allowed."


class PaymentGatewayError(DomainError):
    code = "payment_gateway_error"
    default_message = "Payment provider request failed."


class PersistenceError(DomainError):
    code = "persistence_error"
    default_message = "Storage is temporarily unavailable."
