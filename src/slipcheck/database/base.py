"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from slipcheck.domain.entities import Donation, Setting


class Database(ABC):
    """Abstract database interface for slipcheck."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Donation operations
    @abstractmethod
    def create_donation(
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
    ) -> Donation:
        """Insert a donation.

        Raises:
            ConflictError: If a donation with the same trans_ref exists
        """
        pass

    @abstractmethod
    def get_donation_by_trans_ref(self, trans_ref: str) -> Optional[Donation]:
        """Get donation by transaction reference."""
        pass

    @abstractmethod
    def donation_exists(self, trans_ref: str) -> bool:
        """Check whether a donation with this transaction reference exists."""
        pass

    @abstractmethod
    def list_donations(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Donation]:
        """List donations, newest first, optionally filtered by creation date."""
        pass

    @abstractmethod
    def get_donation_total(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[int, Decimal]:
        """Return (count, total amount) of donations in the date range."""
        pass

    # Setting operations
    @abstractmethod
    def get_setting(self, key: str) -> Optional[Setting]:
        """Get setting by key."""
        pass

    @abstractmethod
    def get_settings(self, keys: list[str]) -> dict[str, Optional[str]]:
        """Get values for several keys at once. Missing keys are omitted."""
        pass

    @abstractmethod
    def list_settings(self) -> list[Setting]:
        """List all settings ordered by key."""
        pass

    @abstractmethod
    def upsert_setting(self, key: str, value: Optional[str], updated_by: Optional[str] = None) -> None:
        """Create or update a setting."""
        pass
