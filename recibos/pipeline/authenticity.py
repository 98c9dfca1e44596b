"""
Canonical receipt form and its SHA-256 fingerprint.
"""
from __future__ import annotations

import hashlib
import re

from recibos.config import Settings
from recibos.schemas import ReceiptData

SEPARATOR = "|"

_NON_DIGIT = re.compile(r"\D")


def _upper(value: str) -> str:
    return (value or "").strip().upper()


def _digits(value: str) -> str:
    return _NON_DIGIT.sub("", value or "")


def canonicalize(data: ReceiptData) -> str:
    """Join the hashed fields, in fixed order, into one normalized string."""
    fields = [
        _upper(data.numero),
        f"{data.valor:.2f}",
        (data.data or "").strip(),
        _upper(data.recebido_de),
        _digits(data.cpf_cnpj),
        _upper(data.referente),
        _upper(data.forma_pagamento),
        _upper(data.emitido_por),
        _digits(data.cpf_emitente),
        _upper(data.endereco_emitente),
        _digits(data.telefone_emitente),
        (data.email_emitente or "").strip().lower(),
    ]
    return SEPARATOR.join(fields)


def generate_receipt_hash(data: ReceiptData, secret: str = "") -> str:
    content = canonicalize(data)
    if secret:
        content = f"{content}{SEPARATOR}{secret}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class Fingerprinter:
    """Computes receipt fingerprints with the deployment's hash secret."""

    def __init__(self, settings: Settings):
        self._secret = settings.HASH_SECRET

    def fingerprint(self, data: ReceiptData) -> str:
        return generate_receipt_hash(data, self._secret)

    def matches(self, data: ReceiptData, expected: str) -> bool:
        return self.fingerprint(data) == expected
