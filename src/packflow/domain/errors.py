"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for the acting user."""


class ConfigurationError(DomainError):
    """Required configuration is missing."""


class SmsGatewayError(DomainError):
    """The SMS gateway rejected or failed to deliver a message."""

    def __init__(self, message: str, status_code: int | None = None, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def invalid_status(status: str) -> str:
    """Return message for an unknown payment status."""
    return f"Invalid status '{status}'. Valid statuses: pending, accepted, rejected, paid"


def invalid_phone_number(number: str) -> str:
    """Return message for a phone number outside the UK mobile format."""
    return (
        f"Invalid phone number '{number}'. Please use UK mobile format "
        "(e.g., 07123456789 or +447123456789)"
    )


def message_too_long(length: int, limit: int) -> str:
    """Return message for an SMS body over the gateway limit."""
    return f"Message too long ({length} characters). Maximum {limit} characters allowed."
