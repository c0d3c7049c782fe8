"""Tests for the upload adapter and usage gate."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from slipcheck.client.adapter import DonationClient
from slipcheck.client.usage_gate import UsageGate


@pytest.fixture
def gate(tmp_path):
    return UsageGate(path=tmp_path / "gate.json")


def _response(body, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


def _lock(gate):
    while gate.record_use():
        pass


class TestUsageGate:
    def test_new_gate_is_open(self, gate):
        assert gate.click_count == 0
        assert not gate.is_locked

    def test_locks_after_limit(self, gate):
        for _ in range(5):
            assert gate.record_use()

        assert not gate.record_use()
        assert gate.is_locked
        assert gate.click_count == 6

    def test_locked_gate_does_not_count(self, gate):
        _lock(gate)

        assert not gate.record_use()
        assert gate.click_count == 6

    def test_unlock(self, gate):
        _lock(gate)
        gate.unlock()

        assert not gate.is_locked
        assert gate.click_count == 0

    def test_state_is_persisted(self, gate):
        gate.record_use()

        assert UsageGate(path=gate.path).click_count == 1

    def test_unreadable_file_resets(self, gate):
        gate.path.write_text("{not json", encoding="utf-8")

        assert gate.click_count == 0
        assert gate.record_use()


class TestDonationClient:
    @patch("slipcheck.client.adapter.requests.post")
    def test_accepted_unlocks_gate(self, mock_post, gate):
        _lock(gate)
        mock_post.return_value = _response(
            {"success": True, "code": "200200", "data": {"transRef": "TXN123"}}
        )
        client = DonationClient("http://localhost:5000/", token="abc", gate=gate)

        result = client.submit(b"image", amount=Decimal("50"), display_name="Fan", message="Hi")

        assert result.accepted
        assert result.data == {"transRef": "TXN123"}
        assert not gate.is_locked

        args, kwargs = mock_post.call_args
        assert args[0] == "http://localhost:5000/verify-slip"
        assert kwargs["files"] == {"file": ("slip.jpg", b"image", "image/jpeg")}
        assert kwargs["data"] == {"amount": "50", "display_name": "Fan", "message": "Hi"}
        assert kwargs["headers"] == {"Authorization": "Bearer abc"}

    @patch("slipcheck.client.adapter.requests.post")
    def test_rejected_keeps_gate_locked(self, mock_post, gate):
        _lock(gate)
        mock_post.return_value = _response(
            {"error": "duplicate_slip", "message": "This slip has already been used (transaction TXN123)"},
            status_code=400,
        )
        client = DonationClient("http://localhost:5000", gate=gate)

        result = client.submit(b"image")

        assert not result.accepted
        assert result.reason == "This slip has already been used (transaction TXN123)"
        assert gate.is_locked
        assert mock_post.call_args.kwargs["headers"] == {}

    @patch("slipcheck.client.adapter.requests.post")
    def test_non_json_error(self, mock_post):
        response = _response(None, status_code=502)
        response.json.side_effect = ValueError("no json")
        mock_post.return_value = response

        result = DonationClient("http://localhost:5000").submit(b"image")

        assert not result.accepted
        assert "HTTP 502" in result.reason

    @patch("slipcheck.client.adapter.requests.post")
    def test_unreachable_server(self, mock_post, gate):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        result = DonationClient("http://localhost:5000", gate=gate).submit(b"image")

        assert not result.accepted
        assert "Could not reach" in result.reason

    @patch("slipcheck.client.adapter.requests.post")
    def test_submit_from_path(self, mock_post, tmp_path):
        slip = tmp_path / "receipt.png"
        slip.write_bytes(b"png-bytes")
        mock_post.return_value = _response({"success": True, "data": {}})

        result = DonationClient("http://localhost:5000").submit(slip)

        assert result.accepted
        assert mock_post.call_args.kwargs["files"] == {
            "file": ("receipt.png", b"png-bytes", "image/png")
        }
