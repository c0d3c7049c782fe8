"""Donation ledger domain service."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from slipcheck.database.base import Database
from slipcheck.domain.entities import Donation as DonationEntity
from slipcheck.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    donation_not_found,
    duplicate_donation,
)


class DonationService:
    """Service for the append-only donation ledger."""

    def __init__(self, db: Database):
        """Initialize donation service.

        Args:
            db: Database instance
        """
        self.db = db

    def donation_exists(self, trans_ref: str) -> bool:
        """Check whether a slip's transaction was already recorded."""
        return self.db.donation_exists(trans_ref)

    def record_donation(
        self,
        trans_ref: str,
        amount: Decimal,
        sender_name: Optional[str] = None,
        display_name: Optional[str] = None,
        message: Optional[str] = None,
        user_id: Optional[str] = None,
        receiver_account: Optional[str] = None,
        transacted_at: Optional[datetime] = None,
        raw_payload: Optional[dict[str, Any]] = None,
    ) -> DonationEntity:
        """Append a donation to the ledger.

        Args:
            trans_ref: Bank transaction reference (unique)
            amount: Amount read from the slip
            sender_name: Sender name read from the slip
            display_name: Name shown to other users
            message: Message left by the donor
            user_id: Authenticated donor, if any
            receiver_account: Receiver account the donation was checked against
            transacted_at: Transfer time read from the slip
            raw_payload: Vendor slip data kept for audit

        Returns:
            The stored donation

        Raises:
            ValidationError: If trans_ref is empty or amount is not positive
            ConflictError: If the transaction was already recorded
        """
        if not trans_ref or not trans_ref.strip():
            raise ValidationError("Transaction reference is required")
        if amount <= 0:
            raise ValidationError(f"Donation amount must be positive, got {amount}")

        if self.db.donation_exists(trans_ref):
            raise ConflictError(duplicate_donation(trans_ref))

        # The storage layer re-checks uniqueness for racing inserts
        return self.db.create_donation(
            trans_ref=trans_ref,
            amount=amount,
            sender_name=sender_name,
            display_name=display_name,
            message=message,
            user_id=user_id,
            receiver_account=receiver_account,
            transacted_at=transacted_at,
            raw_payload=raw_payload,
        )

    def get_donation(self, trans_ref: str) -> DonationEntity:
        """Get a donation by transaction reference.

        Raises:
            NotFoundError: If no donation has this reference
        """
        donation = self.db.get_donation_by_trans_ref(trans_ref)
        if donation is None:
            raise NotFoundError(donation_not_found(trans_ref))
        return donation

    def list_donations(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[DonationEntity]:
        """List donations, newest first."""
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        return self.db.list_donations(start_date=start_date, end_date=end_date, limit=limit)

    def total_donations(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[int, Decimal]:
        """Return (count, total amount) of donations in the range."""
        return self.db.get_donation_total(start_date=start_date, end_date=end_date)
