"""Domain model entities for slipcheck.

These are pure data classes representing business concepts, independent of
the database schema and of the verification vendor's response shape.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class SlipSubmission:
    """A slip upload, alive for one request."""

    image_bytes: Optional[bytes]
    mime_type: str = "image/jpeg"
    claimed_amount: Decimal = Decimal("0")
    display_name: Optional[str] = None
    message: Optional[str] = None
    bearer_token: Optional[str] = None


@dataclass(frozen=True)
class VerificationResult:
    """Normalized vendor answer for a verified slip.

    ``receiver_checked`` is True when the vendor itself already matched the
    receiver and amount conditions.
    """

    code: str
    message: str
    trans_ref: str
    amount: Decimal
    sender_name: Optional[str]
    receiver_account: Optional[str]
    receiver_checked: bool
    transacted_at: Optional[datetime]
    raw_payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DonationPolicy:
    """Receiver and minimum amount a slip is judged against."""

    receiver_account_id: Optional[str]
    minimum_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class Donation:
    """Donation ledger entry."""

    id: int
    trans_ref: str
    amount: Decimal
    sender_name: Optional[str]
    display_name: Optional[str]
    message: Optional[str]
    user_id: Optional[str]
    receiver_account: Optional[str]
    transacted_at: Optional[datetime]
    raw_payload: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class Setting:
    """Key-value setting entry."""

    key: str
    value: Optional[str]
    updated_at: datetime
    updated_by: Optional[str]


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of an accepted slip."""

    result: VerificationResult
    donation: Donation
