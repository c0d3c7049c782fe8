"""Shared pytest fixtures for slipcheck tests."""

import tempfile
import os
from decimal import Decimal

import pytest

from slipcheck.database.factories import create_sqlite_database
from slipcheck.domain.donation import DonationService
from slipcheck.domain.entities import VerificationResult
from slipcheck.domain.settings import (
    MINIMUM_DONATION_AMOUNT,
    RECEIVER_ACCOUNT_ID,
    SettingsService,
)
from slipcheck.gateway.slip2go import VERIFIED_WITH_CONDITIONS


class FakeGateway:
    """Stands in for Slip2GoClient and records every call."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def verify_slip(self, image_bytes, mime_type, amount):
        self.calls.append((image_bytes, mime_type, amount))
        if self.error is not None:
            raise self.error
        return self.result


class FakeIdentityResolver:
    """Maps known tokens to user ids."""

    def __init__(self, users=None, error=None):
        self.users = users or {}
        self.error = error
        self.tokens = []

    def resolve(self, token):
        self.tokens.append(token)
        if self.error is not None:
            raise self.error
        return self.users.get(token)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def settings_service(temp_db):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db)


@pytest.fixture
def donation_service(temp_db):
    """Create a DonationService with a temporary database."""
    return DonationService(temp_db)


@pytest.fixture
def donation_policy(settings_service):
    """Receiver 081-222-3333 with a 20 THB minimum."""
    settings_service.set_setting(RECEIVER_ACCOUNT_ID, "081-222-3333")
    settings_service.set_setting(MINIMUM_DONATION_AMOUNT, "20")
    return settings_service.get_donation_policy()


@pytest.fixture
def make_result():
    """Build a VerificationResult, defaulting to a verified 50 THB slip TXN123."""

    def _make(**overrides):
        code = overrides.pop("code", VERIFIED_WITH_CONDITIONS)
        values = {
            "code": code,
            "message": "Slip found.",
            "trans_ref": "TXN123",
            "amount": Decimal("50"),
            "sender_name": "Somchai Jaidee",
            "receiver_account": "xxx-xxx-3333",
            "receiver_checked": code == VERIFIED_WITH_CONDITIONS,
            "transacted_at": None,
            "raw_payload": {"transRef": "TXN123", "amount": 50},
        }
        values.update(overrides)
        return VerificationResult(**values)

    return _make


@pytest.fixture
def fake_gateway(make_result):
    """Gateway that verifies every slip as TXN123 for 50 THB."""
    return FakeGateway(result=make_result())


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
