"""Mapper functions to convert between domain models and SQLAlchemy models."""

from slipcheck.domain import entities as domain
from slipcheck.database.models import (
    Donation as ORMDonation,
    Setting as ORMSetting,
)


def donation_to_domain(orm_donation: ORMDonation) -> domain.Donation:
    """Convert SQLAlchemy Donation model to domain Donation entity."""
    return domain.Donation(
        id=orm_donation.id,
        trans_ref=orm_donation.trans_ref,
        amount=orm_donation.amount,
        sender_name=orm_donation.sender_name,
        display_name=orm_donation.display_name,
        message=orm_donation.message,
        user_id=orm_donation.user_id,
        receiver_account=orm_donation.receiver_account,
        transacted_at=orm_donation.transacted_at,
        raw_payload=dict(orm_donation.raw_payload or {}),
        created_at=orm_donation.created_at,
    )


def setting_to_domain(orm_setting: ORMSetting) -> domain.Setting:
    """Convert SQLAlchemy Setting model to domain Setting entity."""
    return domain.Setting(
        key=orm_setting.key,
        value=orm_setting.value,
        updated_at=orm_setting.updated_at,
        updated_by=orm_setting.updated_by,
    )
