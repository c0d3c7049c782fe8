"""Tests for bearer token handling."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from slipcheck.web.auth import HTTPIdentityResolver, bearer_token


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc", "abc"),
        ("bearer  abc ", "abc"),
        ("Basic abc", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ],
)
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected


def _response(body, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


@patch("slipcheck.web.auth.requests.get")
def test_resolve_user_id(mock_get):
    mock_get.return_value = _response({"id": "user-1", "email": "fan@example.com"})
    resolver = HTTPIdentityResolver("https://auth.example.com/auth/v1/user", api_key="anon")

    assert resolver.resolve("token-1") == "user-1"

    args, kwargs = mock_get.call_args
    assert args[0] == "https://auth.example.com/auth/v1/user"
    assert kwargs["headers"]["Authorization"] == "Bearer token-1"
    assert kwargs["headers"]["apikey"] == "anon"


@patch("slipcheck.web.auth.requests.get")
def test_resolve_refused_token(mock_get):
    mock_get.return_value = _response({"msg": "invalid JWT"}, status_code=401)

    assert HTTPIdentityResolver("https://auth.example.com").resolve("bad") is None


@patch("slipcheck.web.auth.requests.get")
def test_resolve_unreachable_provider(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError("down")

    assert HTTPIdentityResolver("https://auth.example.com").resolve("token-1") is None


@patch("slipcheck.web.auth.requests.get")
def test_resolve_without_id(mock_get):
    mock_get.return_value = _response({"email": "fan@example.com"})

    assert HTTPIdentityResolver("https://auth.example.com").resolve("token-1") is None
