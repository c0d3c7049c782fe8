"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InputError(ValidationError):
    """Request is missing required input; nothing was sent anywhere."""

    error = "invalid_request"


class SlipRejectedError(DomainError):
    """A slip failed verification.

    ``error`` is the machine-readable classification returned to callers
    (``invalid_slip``, ``wrong_receiver``, ``insufficient_amount`` or
    ``duplicate_slip``); ``code`` is the vendor status code when the
    rejection came from the gateway.
    """

    def __init__(self, error: str, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.error = error
        self.message = message
        self.code = code


class InfrastructureError(Exception):
    """Failure that re-uploading cannot fix."""


class ConfigurationError(InfrastructureError):
    """Required configuration is missing or malformed."""


class GatewayError(InfrastructureError):
    """The verification vendor could not be reached or answered garbage."""


INVALID_SLIP = "invalid_slip"
WRONG_RECEIVER = "wrong_receiver"
INSUFFICIENT_AMOUNT = "insufficient_amount"
DUPLICATE_SLIP = "duplicate_slip"


def format_amount(amount: Decimal) -> str:
    """Render an amount without trailing zeros (``20``, ``15.5``)."""
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return str(amount.normalize())


def no_file_uploaded() -> str:
    """Return message for a request without a slip image."""
    return "No file uploaded"


def wrong_receiver(expected: str, actual: str) -> str:
    """Return message for a slip paid to another account."""
    return f"Transferred to the wrong account! It must be {expected} (this slip was sent to {actual})"


def insufficient_amount(minimum: Decimal, actual: Decimal) -> str:
    """Return message for a slip below the minimum donation."""
    return (
        f"Amount is too low: the minimum is {format_amount(minimum)} THB "
        f"(this slip is for {format_amount(actual)} THB)"
    )


def duplicate_slip(trans_ref: str) -> str:
    """Return message for a slip whose transaction is already recorded."""
    return f"This slip has already been used (transaction {trans_ref})"


def duplicate_donation(trans_ref: str) -> str:
    """Return message for a ledger insert that hit the unique constraint."""
    return f"Donation with transaction reference '{trans_ref}' already exists"


def donation_not_found(trans_ref: str) -> str:
    """Return message for a missing donation."""
    return f"Donation '{trans_ref}' not found"


def setting_not_found(key: str) -> str:
    """Return message for a missing setting."""
    return f"Setting '{key}' not found"
