"""Client-side counterpart of the slip verification endpoint."""

from slipcheck.client.adapter import DonationClient, SubmitResult
from slipcheck.client.usage_gate import UsageGate

__all__ = ["DonationClient", "SubmitResult", "UsageGate"]
