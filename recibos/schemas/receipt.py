"""
Pydantic v2 models shared by the pipeline, the store and the API.

Field names are snake_case in Python and camelCase on the wire
(``recebido_de`` <-> ``recebidoDe``).
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Receipt content
# ---------------------------------------------------------------------------

class ReceiptInput(CamelModel):
    """Raw receipt fields as submitted by the caller, before sanitization.

    ``valorExtenso`` and the issuer fields are accepted but ignored: the
    amount in words is always derived and the issuer identity comes from
    configuration.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    numero: Optional[Union[str, int]] = None
    valor: Optional[Union[float, int, str]] = None
    recebido_de: Optional[str] = None
    cpf_cnpj: Optional[str] = None
    referente: Optional[str] = None
    data: Optional[str] = None
    forma_pagamento: Optional[str] = None
    pix_key: Optional[str] = None
    pix_payload: Optional[str] = None


class ReceiptData(CamelModel):
    """Immutable business content of a receipt."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    numero: str
    valor: float = Field(..., ge=0)
    valor_extenso: str
    recebido_de: str = ""
    cpf_cnpj: str = ""
    referente: str = ""
    data: str = ""
    forma_pagamento: str = ""
    emitido_por: str = ""
    cpf_emitente: str = ""
    endereco_emitente: str = ""
    telefone_emitente: str = ""
    email_emitente: str = ""
    pix_key: Optional[str] = None
    pix_payload: Optional[str] = None


class ReceiptRecord(ReceiptData):
    """A persisted receipt: content plus fingerprint, share id and timestamps."""
    hash: Optional[str] = None
    share_id: str
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# QR / payment code
# ---------------------------------------------------------------------------

class QrCodePayload(CamelModel):
    numero: str
    valor: float
    data: str
    emitente: str
    hash: str
    verify_url: str
    share_url: Optional[str] = None
    pix_key: Optional[str] = None
    pix_payload: Optional[str] = None


class PixRequest(CamelModel):
    key: str
    amount: float = 0
    merchant_name: Optional[str] = None
    merchant_city: Optional[str] = None
    tx_id: Optional[str] = None


class PixResponse(CamelModel):
    payload: str
    crc: str
    valid: bool


# ---------------------------------------------------------------------------
# API response envelopes
# ---------------------------------------------------------------------------

class IssueResponse(CamelModel):
    hash: str
    qr_payload: QrCodePayload


class VerifiedReceipt(CamelModel):
    numero: str
    valor: float
    valor_extenso: str
    recebido_de: str
    cpf_cnpj: str
    referente: str
    data: str
    forma_pagamento: str
    emitido_por: str
    cpf_emitente: str
    endereco_emitente: str
    telefone_emitente: str
    email_emitente: str
    share_id: str
    share_url: str
    hash: str
    created_at: datetime
    updated_at: datetime


class VerifyResponse(CamelModel):
    valid: bool
    hash_matches: bool
    provided_hash_matches: Optional[bool] = None
    recibo: VerifiedReceipt
