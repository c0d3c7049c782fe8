"""Settings domain service."""

import logging
from decimal import Decimal
from typing import Optional

from slipcheck.database.base import Database
from slipcheck.domain.entities import DonationPolicy, Setting as SettingEntity
from slipcheck.domain.errors import ConfigurationError, ValidationError
from slipcheck.utils.account_id import normalize_account_id
from slipcheck.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

RECEIVER_ACCOUNT_ID = "receiver_account_id"
MINIMUM_DONATION_AMOUNT = "minimum_donation_amount"
DONATION_ENABLED = "donation_enabled"

KNOWN_SETTINGS = {
    RECEIVER_ACCOUNT_ID: "PromptPay phone number or ID that donations must be sent to",
    MINIMUM_DONATION_AMOUNT: "Smallest accepted donation in THB",
    DONATION_ENABLED: "Whether the donation flow is offered (true/false)",
}


class SettingsService:
    """Service for reading and updating key-value settings."""

    def __init__(self, db: Database):
        """Initialize settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_setting(self, key: str) -> Optional[SettingEntity]:
        """Get a setting by key, or None if unset."""
        return self.db.get_setting(key)

    def list_settings(self) -> list[SettingEntity]:
        """List all stored settings."""
        return self.db.list_settings()

    def set_setting(self, key: str, value: Optional[str], updated_by: Optional[str] = None) -> None:
        """Create or update a setting.

        Known keys are validated so a bad value cannot silently disable a check.

        Raises:
            ValidationError: If the value is invalid for a known key
        """
        if value is not None:
            value = value.strip()
        if key == MINIMUM_DONATION_AMOUNT and value:
            try:
                parse_amount(value)
            except ValueError as e:
                raise ValidationError(f"Invalid {key}: {e}")
        elif key == DONATION_ENABLED and value:
            if value.lower() not in ("true", "false"):
                raise ValidationError(f"Invalid {key}: expected 'true' or 'false', got '{value}'")
        elif key == RECEIVER_ACCOUNT_ID and value:
            if not normalize_account_id(value):
                raise ValidationError(f"Invalid {key}: '{value}'")

        self.db.upsert_setting(key, value, updated_by=updated_by)
        logger.info("Setting %s updated by %s", key, updated_by or "cli")

    def get_donation_policy(self) -> DonationPolicy:
        """Read the current receiver and minimum amount.

        Read fresh on every call; an unset receiver means no restriction and
        an unset minimum means 0.

        Raises:
            ConfigurationError: If the stored minimum amount is not a number
        """
        values = self.db.get_settings([RECEIVER_ACCOUNT_ID, MINIMUM_DONATION_AMOUNT])

        raw_minimum = values.get(MINIMUM_DONATION_AMOUNT)
        minimum = Decimal("0")
        if raw_minimum:
            try:
                minimum = parse_amount(raw_minimum)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {MINIMUM_DONATION_AMOUNT} setting: {e}")

        return DonationPolicy(
            receiver_account_id=normalize_account_id(values.get(RECEIVER_ACCOUNT_ID)),
            minimum_amount=minimum,
        )

    def is_donation_enabled(self) -> bool:
        """Donations are enabled unless explicitly set to false."""
        setting = self.db.get_setting(DONATION_ENABLED)
        if setting is None or setting.value is None:
            return True
        return setting.value.strip().lower() != "false"
