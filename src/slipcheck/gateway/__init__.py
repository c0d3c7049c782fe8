"""Slip verification vendor clients."""

from slipcheck.gateway.slip2go import Slip2GoClient, normalize_slip_payload

__all__ = ["Slip2GoClient", "normalize_slip_payload"]
