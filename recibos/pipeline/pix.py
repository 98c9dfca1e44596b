"""
Static PIX payment code ("copia e cola") — EMV TLV encoding with a CRC16 trailer.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from recibos.errors import PaymentCodeError

POLYNOMIAL = 0x1021
PIX_GUI = "BR.GOV.BCB.PIX"
CRC_TAG = "6304"

DEFAULT_MERCHANT_NAME = "DUARTE URBANISMO"
DEFAULT_MERCHANT_CITY = "BRASIL"
DEFAULT_TX_ID = "SGCI"

_KEY_STRIP = re.compile(r"[\s./-]")
_NOT_ALNUM_SPACE = re.compile(r"[^A-Za-z0-9 ]")


@dataclass(frozen=True)
class EmvField:
    tag: str
    length: int
    value: str


# ---------------------------------------------------------------------------
# Checksum
# ---------------------------------------------------------------------------

def crc16(text: str) -> str:
    """CRC-16/CCITT-FALSE (init 0xFFFF, poly 0x1021) as 4 uppercase hex digits."""
    crc = 0xFFFF
    for ch in text:
        crc ^= ord(ch) << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ POLYNOMIAL
            else:
                crc = crc << 1
            crc &= 0xFFFF
    return f"{crc:04X}"


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def emv_field(tag: str, value: str) -> str:
    if len(value) > 99:
        raise PaymentCodeError(f"EMV field {tag} too long: {len(value)} chars (max 99)")
    return f"{tag}{len(value):02d}{value}"


def normalize_text(value: str, max_length: int) -> str:
    """Strip accents and punctuation, upper-case and truncate."""
    decomposed = unicodedata.normalize("NFD", value or "")
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NOT_ALNUM_SPACE.sub("", ascii_only).strip().upper()[:max_length]


def sanitize_key(key: str) -> str:
    return _KEY_STRIP.sub("", key or "")


def format_amount(amount: float) -> str:
    return f"{amount:.2f}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_payment_code(
    key: str,
    amount: float,
    merchant_name: str,
    merchant_city: str,
    tx_id: str,
) -> str:
    """Build a static PIX payment code.

    Fields are emitted in fixed order (00, 01, 26, 52, 53, [54], 58, 59, 60, 62)
    and closed with ``6304`` plus the CRC16 of everything before it.
    """
    sanitized_key = sanitize_key(key)
    if not sanitized_key:
        raise PaymentCodeError("Chave PIX inválida")

    name = normalize_text(merchant_name, 25) or DEFAULT_MERCHANT_NAME
    city = normalize_text(merchant_city, 15) or DEFAULT_MERCHANT_CITY
    txid = normalize_text(tx_id, 25).replace(" ", "") or DEFAULT_TX_ID
    amount_string = format_amount(amount) if amount and amount > 0 else None

    merchant_account = emv_field("00", PIX_GUI) + emv_field("01", sanitized_key)

    parts = [
        emv_field("00", "01"),
        emv_field("01", "12" if amount_string else "11"),
        emv_field("26", merchant_account),
        emv_field("52", "0000"),
        emv_field("53", "986"),
    ]
    if amount_string:
        parts.append(emv_field("54", amount_string))
    parts.extend([
        emv_field("58", "BR"),
        emv_field("59", name),
        emv_field("60", city),
        emv_field("62", emv_field("05", txid)),
    ])

    body = "".join(parts) + CRC_TAG
    return body + crc16(body)


def parse_payment_code(code: str) -> list[EmvField]:
    """Split a payment code into its top-level TLV fields."""
    fields: list[EmvField] = []
    i = 0
    while i < len(code):
        if i + 4 > len(code):
            raise PaymentCodeError(f"Truncated field header at offset {i}")
        tag = code[i:i + 2]
        length_text = code[i + 2:i + 4]
        if not length_text.isdigit():
            raise PaymentCodeError(f"Invalid length for field {tag}: {length_text!r}")
        length = int(length_text)
        value = code[i + 4:i + 4 + length]
        if len(value) != length:
            raise PaymentCodeError(f"Truncated value for field {tag}")
        fields.append(EmvField(tag=tag, length=length, value=value))
        i += 4 + length
    return fields


def has_valid_checksum(code: str) -> bool:
    if len(code) < 8 or code[-8:-4] != CRC_TAG:
        return False
    return crc16(code[:-4]) == code[-4:].upper()
