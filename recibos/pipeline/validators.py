"""
Field validators for receipt data. Every check returns an error message or ``None``;
``validate_receipt_data`` collects all of them.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from recibos.schemas import ReceiptData

MAX_VALOR = 999_999_999

_NON_DIGIT = re.compile(r"\D")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def only_digits(value: str) -> str:
    return _NON_DIGIT.sub("", value or "")


# ---------------------------------------------------------------------------
# Tax ids
# ---------------------------------------------------------------------------

def is_valid_cpf(cpf: str) -> bool:
    digits = only_digits(cpf)
    if len(digits) != 11 or len(set(digits)) == 1:
        return False

    nums = [int(c) for c in digits]
    for pos in (9, 10):
        total = sum(nums[i] * (pos + 1 - i) for i in range(pos))
        check = 11 - total % 11
        if (0 if check >= 10 else check) != nums[pos]:
            return False
    return True


def is_valid_cnpj(cnpj: str) -> bool:
    digits = only_digits(cnpj)
    if len(digits) != 14 or len(set(digits)) == 1:
        return False

    nums = [int(c) for c in digits]
    for pos in (12, 13):
        weights = list(range(pos - 7, 1, -1)) + list(range(9, 1, -1))
        total = sum(n * w for n, w in zip(nums[:pos], weights))
        check = 0 if total % 11 < 2 else 11 - total % 11
        if check != nums[pos]:
            return False
    return True


def check_cpf_cnpj(value: str) -> Optional[str]:
    digits = only_digits(value)
    if not digits:
        return "Campo obrigatório"
    if len(digits) == 11:
        return None if is_valid_cpf(digits) else "CPF inválido"
    if len(digits) == 14:
        return None if is_valid_cnpj(digits) else "CNPJ inválido"
    return "CPF deve ter 11 dígitos ou CNPJ 14 dígitos"


# ---------------------------------------------------------------------------
# Other fields
# ---------------------------------------------------------------------------

def check_text(value: str, field_name: str, min_length: int = 3) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return f"{field_name} é obrigatório"
    if len(text) < min_length:
        return f"{field_name} deve ter pelo menos {min_length} caracteres"
    return None


def check_valor(valor: float) -> Optional[str]:
    if valor <= 0:
        return "Valor deve ser maior que zero"
    if valor > MAX_VALOR:
        return "Valor muito alto"
    return None


def check_email(email: str) -> Optional[str]:
    if not email:
        return "Email obrigatório"
    return None if _EMAIL.match(email) else "Email inválido"


def check_telefone(telefone: str) -> Optional[str]:
    digits = only_digits(telefone)
    if not digits:
        return "Telefone obrigatório"
    if not 10 <= len(digits) <= 11:
        return "Telefone deve ter 10 ou 11 dígitos"
    return None


def _shift_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return day.replace(year=day.year + years, day=28)


def check_data(value: str, today: Optional[date] = None) -> Optional[str]:
    if not value:
        return "Data obrigatória"
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return "Data inválida"

    today = today or date.today()
    if parsed > _shift_years(today, 1):
        return "Data não pode ser mais de 1 ano no futuro"
    if parsed < _shift_years(today, -10):
        return "Data muito antiga"
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_receipt_data(
    data: ReceiptData,
    amount_is_numeric: bool = True,
    today: Optional[date] = None,
) -> list[str]:
    """Return every field-level problem found in ``data`` (empty list = valid)."""
    checks = [
        check_text(data.numero, "Número do recibo"),
        check_valor(data.valor) if amount_is_numeric else "Valor deve ser numérico",
        check_text(data.recebido_de, "Nome/Razão Social"),
        check_cpf_cnpj(data.cpf_cnpj),
        check_text(data.referente, "Referente a", 10),
        check_data(data.data, today),
        check_text(data.forma_pagamento, "Forma de pagamento"),
        check_text(data.endereco_emitente, "Endereço", 10),
        check_telefone(data.telefone_emitente),
        check_email(data.email_emitente),
        check_cpf_cnpj(data.cpf_emitente),
    ]
    return [message for message in checks if message]
