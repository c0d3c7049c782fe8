"""PromptPay QR payload generation.

Builds the EMVCo merchant-presented payload that Thai banking apps scan to
prefill a PromptPay transfer. The payload is a sequence of ID/length/value
fields terminated by a CRC16-CCITT checksum.
"""

import re
from decimal import Decimal
from typing import Optional

PAYLOAD_FORMAT_INDICATOR = "00"
POINT_OF_INITIATION = "01"
MERCHANT_ACCOUNT_INFO = "29"
TRANSACTION_CURRENCY = "53"
TRANSACTION_AMOUNT = "54"
COUNTRY_CODE = "58"
CRC = "63"

PROMPTPAY_AID = "A000000677010111"
TARGET_MOBILE = "01"
TARGET_NATIONAL_ID = "02"
TARGET_EWALLET = "03"

STATIC_QR = "11"
DYNAMIC_QR = "12"
CURRENCY_THB = "764"


def _field(tag: str, value: str) -> str:
    return f"{tag}{len(value):02d}{value}"


def crc16(data: str) -> str:
    """CRC-16/CCITT-FALSE of ``data`` as four uppercase hex digits."""
    crc = 0xFFFF
    for byte in data.encode("ascii"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return f"{crc:04X}"


def format_target(target: str) -> tuple[str, str]:
    """Return (target tag, formatted value) for a PromptPay id.

    Mobile numbers become 13 digits with the 66 country code; national IDs
    (13 digits) and e-wallet IDs (15 digits) pass through.
    """
    digits = re.sub(r"\D", "", target or "")
    if not digits:
        raise ValueError(f"Invalid PromptPay target '{target}'")
    if len(digits) >= 15:
        return TARGET_EWALLET, digits
    if len(digits) >= 13:
        return TARGET_NATIONAL_ID, digits
    mobile = re.sub(r"^0", "66", digits)
    return TARGET_MOBILE, mobile.rjust(13, "0")[-13:]


def generate_payload(target: str, amount: Optional[Decimal] = None) -> str:
    """Generate a PromptPay payload for ``target``, optionally fixing the amount."""
    target_tag, target_value = format_target(target)

    parts = [
        _field(PAYLOAD_FORMAT_INDICATOR, "01"),
        _field(POINT_OF_INITIATION, DYNAMIC_QR if amount else STATIC_QR),
        _field(
            MERCHANT_ACCOUNT_INFO,
            _field("00", PROMPTPAY_AID) + _field(target_tag, target_value),
        ),
        _field(COUNTRY_CODE, "TH"),
        _field(TRANSACTION_CURRENCY, CURRENCY_THB),
    ]
    if amount:
        parts.append(_field(TRANSACTION_AMOUNT, f"{Decimal(amount):.2f}"))

    data = "".join(parts) + CRC + "04"
    return data + crc16(data)
