"""Slip2Go slip verification client.

Sends a slip image to Slip2Go's base64 endpoint together with the receiver
and amount conditions, and turns the answer into a ``VerificationResult``
or a ``SlipRejectedError``.
"""

import base64
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

import requests

from slipcheck.domain.entities import VerificationResult
from slipcheck.domain.errors import (
    INVALID_SLIP,
    ConfigurationError,
    GatewayError,
    SlipRejectedError,
)
from slipcheck.utils.amount_parser import parse_amount
from slipcheck.utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://connect.slip2go.com/api/verify-slip/qr-base64/info"

# Slip is genuine; no conditions were evaluated by the vendor
VERIFIED = "200000"
# Slip is genuine and the vendor matched receiver and amount conditions
VERIFIED_WITH_CONDITIONS = "200200"
SUCCESS_CODES = frozenset({VERIFIED, VERIFIED_WITH_CONDITIONS})

# Every other code is a rejection; unknown codes use the vendor's own message
REJECTION_MESSAGES = {
    "200401": "Receiver account does not match (did you transfer to the wrong person?)",
    "200402": "Transferred amount does not match the required amount",
    "200403": "Transfer date does not match the required conditions",
    "200404": "This slip was not found in the bank's records (is it genuine?)",
    "200500": "The slip is damaged or forged",
    "200501": "This slip has already been used",
}

TRANS_REF_FIELDS = (("transRef",), ("trans_ref",), ("trans_id",))
RECEIVER_ACCOUNT_FIELDS = (
    ("receiver", "account", "proxyId"),
    ("receiver", "account", "accountNo"),
    ("receiver", "account", "proxy", "account"),
    ("receiver", "account", "bank", "account"),
)
SENDER_NAME_FIELDS = (
    ("sender", "account", "name", "th"),
    ("sender", "account", "name"),
    ("sender", "account", "name", "en"),
    ("sender", "displayName"),
    ("sender", "name"),
)
TRANSACTED_AT_FIELDS = (("dateTime",), ("transDate",), ("transactedAt",))


def _lookup(data: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def first_field(data: dict[str, Any], paths: Iterable[tuple[str, ...]]) -> Optional[str]:
    """Return the first non-empty scalar found along ``paths``, in order."""
    for path in paths:
        value = _lookup(data, path)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (str, int, float)):
            text = str(value).strip()
            if text:
                return text
    return None


def normalize_slip_payload(body: dict[str, Any], receiver_condition_sent: bool = False) -> VerificationResult:
    """Normalize a successful Slip2Go body.

    ``data`` is either the slip object or a list whose first element is the
    slip. Field priority is given by the ``*_FIELDS`` tables above.

    A 200200 answer only vouches for the receiver when ``checkReceiver`` was
    part of the request; otherwise the receiver is left to the local policy.

    Raises:
        SlipRejectedError: If the body carries no usable slip
    """
    code = str(body.get("code", ""))
    data = body.get("data")
    slip = data[0] if isinstance(data, list) and data else data
    if not isinstance(slip, dict) or not slip:
        raise SlipRejectedError(INVALID_SLIP, "The verification service returned no slip data", code)

    trans_ref = first_field(slip, TRANS_REF_FIELDS)
    if trans_ref is None:
        raise SlipRejectedError(INVALID_SLIP, "The slip has no transaction reference", code)

    try:
        amount = parse_amount(str(slip.get("amount", "0")))
    except ValueError:
        raise SlipRejectedError(INVALID_SLIP, "Could not read the amount on the slip", code)

    return VerificationResult(
        code=code,
        message=str(body.get("message") or ""),
        trans_ref=trans_ref,
        amount=amount,
        sender_name=first_field(slip, SENDER_NAME_FIELDS),
        receiver_account=first_field(slip, RECEIVER_ACCOUNT_FIELDS),
        receiver_checked=code == VERIFIED_WITH_CONDITIONS and receiver_condition_sent,
        transacted_at=parse_timestamp(first_field(slip, TRANSACTED_AT_FIELDS)),
        raw_payload=slip,
    )


class Slip2GoClient:
    """Client for the Slip2Go verification API."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        receiver_names: Iterable[dict[str, str]] = (),
        timeout: int = 30,
    ):
        """Initialize the client.

        Args:
            api_key: Slip2Go bearer token; checked when a slip is sent
            api_url: Base64 verification endpoint
            receiver_names: Accepted receiver name variants, e.g.
                ``{"accountNameTH": "...", "accountNameEN": "..."}``
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.api_url = api_url
        self.receiver_names = list(receiver_names)
        self.timeout = timeout

    def build_payload(self, image_bytes: bytes, mime_type: str, amount: Decimal) -> dict[str, Any]:
        """Build the JSON request body.

        Duplicate checking is always left to the local ledger.
        """
        encoded = base64.b64encode(image_bytes).decode("ascii")
        check_condition: dict[str, Any] = {
            "checkDuplicate": False,
            "checkAmount": {"type": "gte", "amount": float(amount)},
        }
        if self.receiver_names:
            check_condition["checkReceiver"] = self.receiver_names
        return {
            "payload": {
                "imageBase64": f"data:{mime_type};base64,{encoded}",
                "checkCondition": check_condition,
            }
        }

    def verify_slip(self, image_bytes: bytes, mime_type: str, amount: Decimal) -> VerificationResult:
        """Verify a slip image.

        Args:
            image_bytes: Raw image data
            mime_type: Image MIME type, e.g. ``image/jpeg``
            amount: Minimum amount the slip must carry

        Returns:
            Normalized verification result

        Raises:
            ConfigurationError: If no API key is configured or it is refused
            GatewayError: If the vendor cannot be reached or answers non-JSON
            SlipRejectedError: If the vendor rejects the slip
        """
        if not self.api_key:
            raise ConfigurationError("SLIP2GO_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        payload = self.build_payload(image_bytes, mime_type, amount)

        logger.info("Sending slip to Slip2Go (%d bytes, amount >= %s)", len(image_bytes), amount)
        try:
            response = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise GatewayError("Slip verification timed out")
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Could not connect to the slip verification service: {e}")

        if response.status_code in (401, 403):
            raise ConfigurationError(
                f"Slip verification credentials were refused (HTTP {response.status_code})"
            )

        try:
            body = response.json()
        except ValueError:
            raise GatewayError(
                f"Slip verification service returned a non-JSON response (HTTP {response.status_code})"
            )
        if not isinstance(body, dict):
            raise GatewayError("Slip verification service returned an unexpected response")

        logger.debug("Slip2Go response: %s", body)

        code = str(body.get("code", ""))
        if code not in SUCCESS_CODES:
            message = REJECTION_MESSAGES.get(code) or body.get("message") or "Invalid slip"
            logger.info("Slip2Go rejected slip: code=%s message=%s", code, body.get("message"))
            raise SlipRejectedError(INVALID_SLIP, message, code or None)

        result = normalize_slip_payload(body, receiver_condition_sent=bool(self.receiver_names))
        logger.info("Slip2Go verified %s: code=%s amount=%s", result.trans_ref, code, result.amount)
        return result
