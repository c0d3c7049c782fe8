"""Utility functions for slipcheck."""

from slipcheck.utils.date_parser import parse_date
from slipcheck.utils.amount_parser import parse_amount
from slipcheck.utils.account_id import normalize_account_id, is_masked

__all__ = ["parse_date", "parse_amount", "normalize_account_id", "is_masked"]
