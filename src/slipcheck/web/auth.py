"""Caller identity resolution for bearer tokens."""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class HTTPIdentityResolver:
    """Resolves a bearer token by asking the auth provider who it belongs to.

    The provider is expected to answer ``GET <auth_url>`` with the user
    object (``{"id": ...}``), as Supabase's ``/auth/v1/user`` does.
    """

    def __init__(self, auth_url: str, api_key: Optional[str] = None, timeout: int = 10):
        self.auth_url = auth_url
        self.api_key = api_key
        self.timeout = timeout

    def resolve(self, token: str) -> Optional[str]:
        """Return the user id for ``token``, or None if it cannot be resolved."""
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            response = requests.get(self.auth_url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Auth provider unreachable: %s", e)
            return None

        if response.status_code != 200:
            logger.info("Auth provider refused token (HTTP %s)", response.status_code)
            return None

        try:
            user = response.json()
        except ValueError:
            logger.warning("Auth provider returned a non-JSON response")
            return None

        user_id = user.get("id") if isinstance(user, dict) else None
        return str(user_id) if user_id else None
