"""Upload adapter for the /verify-slip endpoint."""

import logging
import mimetypes
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import requests

from slipcheck.client.usage_gate import UsageGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    """Accept/reject decision as seen by the client."""

    accepted: bool
    reason: Optional[str] = None
    data: Optional[dict[str, Any]] = None


class DonationClient:
    """Submits slips to a slipcheck server and unlocks the usage gate on success.

    The client only looks at ``success`` and ``message`` in the response; what
    the vendor codes mean is the server's business.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        gate: Optional[UsageGate] = None,
        timeout: int = 60,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.gate = gate
        self.timeout = timeout

    @property
    def verify_url(self) -> str:
        return f"{self.base_url}/verify-slip"

    def submit(
        self,
        image: Path | str | bytes,
        amount: Optional[Decimal] = None,
        display_name: Optional[str] = None,
        message: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> SubmitResult:
        """Upload a slip.

        Args:
            image: Path to the slip image, or its bytes
            amount: Amount the donor says they transferred
            display_name: Name to show for the donation
            message: Message left by the donor
            filename: Upload filename when ``image`` is bytes

        Returns:
            SubmitResult; ``reason`` is set when the slip was not accepted
        """
        if isinstance(image, (str, Path)):
            path = Path(image)
            content = path.read_bytes()
            filename = filename or path.name
        else:
            content = image
            filename = filename or "slip.jpg"
        mime_type = mimetypes.guess_type(filename)[0] or "image/jpeg"

        form: dict[str, str] = {}
        if amount is not None:
            form["amount"] = str(amount)
        if display_name:
            form["display_name"] = display_name
        if message:
            form["message"] = message
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        try:
            response = requests.post(
                self.verify_url,
                files={"file": (filename, content, mime_type)},
                data=form,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Slip upload failed: %s", e)
            return SubmitResult(accepted=False, reason=f"Could not reach the verification server: {e}")

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code == 200 and body.get("success"):
            if self.gate is not None:
                self.gate.unlock()
            return SubmitResult(accepted=True, data=body.get("data"))

        reason = body.get("message") or f"Slip verification failed (HTTP {response.status_code})"
        return SubmitResult(accepted=False, reason=reason)
