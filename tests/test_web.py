"""Tests for the HTTP endpoints."""

import io
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from conftest import FakeGateway, FakeIdentityResolver
from slipcheck.config import AppConfig
from slipcheck.domain.errors import ConfigurationError, GatewayError, INVALID_SLIP, SlipRejectedError
from slipcheck.domain.settings import DONATION_ENABLED
from slipcheck.web.app import create_app


def _make_client(temp_db, gateway, identity_resolver=None):
    app = create_app(
        config=AppConfig(),
        database_factory=lambda: temp_db,
        gateway=gateway,
        identity_resolver=identity_resolver,
    )
    app.testing = True
    return app.test_client()


def _upload(client, image=b"slip-image", filename="slip.jpg", headers=None, **form):
    data = dict(form)
    if image is not None:
        data["file"] = (io.BytesIO(image), filename)
    return client.post(
        "/verify-slip", data=data, content_type="multipart/form-data", headers=headers
    )


@pytest.fixture
def client(temp_db, fake_gateway, donation_policy):
    return _make_client(temp_db, fake_gateway)


class TestVerifySlipEndpoint:
    def test_accepted(self, client, fake_gateway, donation_service):
        response = _upload(client, amount="50")

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["code"] == "200200"
        assert body["data"] == {"transRef": "TXN123", "amount": 50}
        assert donation_service.donation_exists("TXN123")
        assert fake_gateway.calls == [(b"slip-image", "image/jpeg", Decimal("50"))]

    def test_duplicate(self, client):
        _upload(client, amount="50")
        response = _upload(client, amount="50")

        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "duplicate_slip"
        assert "TXN123" in body["message"]

    def test_no_file(self, client, fake_gateway):
        response = _upload(client, image=None, amount="50")

        assert response.status_code == 400
        assert response.get_json() == {"error": "invalid_request", "message": "No file uploaded"}
        assert fake_gateway.calls == []

    def test_empty_file(self, client, fake_gateway):
        response = _upload(client, image=b"", amount="50")

        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_request"
        assert fake_gateway.calls == []

    def test_invalid_amount(self, client, fake_gateway):
        response = _upload(client, amount="lots")

        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_request"
        assert fake_gateway.calls == []

    def test_missing_amount_defaults_to_zero(self, client, fake_gateway):
        response = _upload(client)

        assert response.status_code == 200
        assert fake_gateway.calls[0][2] == Decimal("0")

    def test_png_mime_type(self, client, fake_gateway):
        _upload(client, filename="slip.png", amount="50")

        assert fake_gateway.calls[0][1] == "image/png"

    def test_insufficient_amount(self, temp_db, donation_policy, make_result):
        client = _make_client(temp_db, FakeGateway(result=make_result(amount=Decimal("15"))))

        response = _upload(client, amount="15")

        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "insufficient_amount"
        assert "20" in body["message"] and "15" in body["message"]
        assert "code" not in body

    def test_gateway_rejection_carries_vendor_code(self, temp_db, donation_policy):
        gateway = FakeGateway(error=SlipRejectedError(INVALID_SLIP, "Slip not found", "200404"))
        client = _make_client(temp_db, gateway)

        response = _upload(client, amount="50")

        assert response.status_code == 400
        assert response.get_json() == {
            "error": "invalid_slip",
            "message": "Slip not found",
            "code": "200404",
        }

    @pytest.mark.parametrize(
        "error", [ConfigurationError("SLIP2GO_API_KEY is not set"), GatewayError("timed out")]
    )
    def test_infrastructure_error(self, temp_db, donation_policy, error, donation_service):
        client = _make_client(temp_db, FakeGateway(error=error))

        response = _upload(client, amount="50")

        assert response.status_code == 500
        body = response.get_json()
        assert body["error"] == "server_error"
        assert body["message"] == str(error)
        assert donation_service.total_donations()[0] == 0

    def test_unexpected_error(self, temp_db, donation_policy):
        client = _make_client(temp_db, FakeGateway(error=RuntimeError("boom")))

        response = _upload(client, amount="50")

        assert response.status_code == 500
        assert response.get_json()["message"] == "Internal server error, please try again"

    def test_bearer_token_identifies_donor(self, temp_db, fake_gateway, donation_policy, donation_service):
        resolver = FakeIdentityResolver(users={"abc": "user-42"})
        client = _make_client(temp_db, fake_gateway, identity_resolver=resolver)

        response = _upload(client, amount="50", headers={"Authorization": "Bearer abc"})

        assert response.status_code == 200
        assert donation_service.get_donation("TXN123").user_id == "user-42"

    def test_donor_details_are_stored(self, client, donation_service):
        _upload(client, amount="50", display_name="Fan", message="Thanks!")

        donation = donation_service.get_donation("TXN123")
        assert donation.display_name == "Fan"
        assert donation.message == "Thanks!"


class TestCors:
    def test_preflight(self, client, fake_gateway):
        response = client.options("/verify-slip")

        assert response.status_code == 200
        assert response.get_data(as_text=True) == "ok"
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "authorization" in response.headers["Access-Control-Allow-Headers"]
        assert fake_gateway.calls == []

    def test_error_responses_carry_cors_headers(self, client):
        response = _upload(client, image=None)

        assert response.headers["Access-Control-Allow-Origin"] == "*"


class TestDonationSettingsEndpoint:
    def test_settings(self, client):
        response = client.get("/donation-settings")

        assert response.status_code == 200
        body = response.get_json()
        assert body["enabled"] is True
        assert body["receiver_account_id"] == "0812223333"
        assert body["minimum_amount"] == 20.0
        assert body["promptpay_payload"].startswith("000201010211")

    def test_settings_with_amount(self, client):
        body = client.get("/donation-settings?amount=50").get_json()

        assert "540550.00" in body["promptpay_payload"]

    def test_settings_with_invalid_amount(self, client):
        response = client.get("/donation-settings?amount=abc")

        assert response.status_code == 400
        assert response.get_json()["error"] == "invalid_request"

    def test_settings_without_receiver(self, temp_db, fake_gateway, settings_service):
        settings_service.set_setting(DONATION_ENABLED, "false")
        client = _make_client(temp_db, fake_gateway)

        body = client.get("/donation-settings").get_json()

        assert body == {
            "enabled": False,
            "receiver_account_id": None,
            "minimum_amount": 0.0,
            "promptpay_payload": None,
        }


def test_oversized_upload_returns_json(temp_db, fake_gateway, donation_policy):
    app = create_app(config=AppConfig(), database_factory=lambda: temp_db, gateway=fake_gateway)
    app.config["MAX_CONTENT_LENGTH"] = 1024
    client = app.test_client()

    response = _upload(client, image=b"x" * 4096, amount="50")

    assert response.status_code == 413
    assert response.is_json
    assert response.get_json() == {"error": "invalid_request", "message": "Uploaded file is too large"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert fake_gateway.calls == []


def test_donation_settings_storage_failure_returns_json(temp_db, fake_gateway, monkeypatch):
    client = _make_client(temp_db, fake_gateway)

    def broken(keys):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(temp_db, "get_settings", broken)

    response = client.get("/donation-settings")

    assert response.status_code == 500
    assert response.is_json
    assert response.get_json()["error"] == "server_error"
