"""
Raw caller input -> ReceiptData.

Issuer identity always comes from configuration and the amount in words is
always derived from the amount.
"""
from __future__ import annotations

import re
import time
from typing import Optional, Union

from recibos.config import Settings
from recibos.pipeline.extenso import amount_in_words
from recibos.pipeline.validators import MAX_VALOR
from recibos.schemas import ReceiptData, ReceiptInput

_NUMERO_ALLOWED = re.compile(r"[^A-Z0-9-]")


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value) -> Optional[str]:
    return _text(value) or None


def sanitize_numero(numero: Union[str, int, None], now_ms: Optional[int] = None) -> str:
    """Upper-case, keep ``A-Z0-9-``, cap at 32 chars; generate ``REC-XXXXXX`` if blank."""
    normalized = _NUMERO_ALLOWED.sub("", _text(numero).upper())[:32]
    if normalized:
        return normalized
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"REC-{str(now_ms)[-6:]}"


def parse_amount(value: Union[float, int, str, None]) -> Optional[float]:
    """Parse an amount; accepts ``1234.5`` and ``"1.234,50"``. ``None`` if not numeric."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = value.strip().replace("R$", "").strip()
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            amount = float(text)
        except ValueError:
            return None
    if amount != amount or amount in (float("inf"), float("-inf")):
        return None
    return round(amount, 2)


def sanitize_receipt_data(
    payload: ReceiptInput, settings: Settings
) -> tuple[ReceiptData, bool]:
    """Return ``(data, amount_is_numeric)``.

    A non-numeric amount is carried as ``0.0`` so the remaining fields can
    still be validated in the same pass.
    """
    amount = parse_amount(payload.valor)
    amount_is_numeric = amount is not None
    valor = max(amount or 0.0, 0.0)

    data = ReceiptData(
        numero=sanitize_numero(payload.numero),
        valor=valor,
        valor_extenso=amount_in_words(valor) if valor <= MAX_VALOR else "",
        recebido_de=_text(payload.recebido_de),
        cpf_cnpj=_text(payload.cpf_cnpj),
        referente=_text(payload.referente),
        data=_text(payload.data)[:10],
        forma_pagamento=_text(payload.forma_pagamento),
        emitido_por=settings.EMISSOR_NOME,
        cpf_emitente=settings.EMISSOR_CNPJ,
        endereco_emitente=_text(settings.EMPRESA_ENDERECO),
        telefone_emitente=_text(settings.EMPRESA_TELEFONE),
        email_emitente=_text(settings.EMPRESA_EMAIL).lower(),
        pix_key=_optional_text(payload.pix_key),
        pix_payload=_optional_text(payload.pix_payload),
    )
    return data, amount_is_numeric
