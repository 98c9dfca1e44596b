"""
Verification / share URLs and the QR payload printed on a receipt.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from recibos.schemas import QrCodePayload, ReceiptData


def _base(origin: str) -> str:
    return origin.rstrip("/")


def build_verification_url(numero: str, hash_value: str, origin: str) -> str:
    return (
        f"{_base(origin)}/api/recibos/{quote(numero, safe='')}"
        f"?hash={quote(hash_value, safe='')}"
    )


def build_share_url(share_id: str, origin: str) -> str:
    return f"{_base(origin)}/recibos/share/{quote(share_id, safe='')}"


def build_qr_payload(
    data: ReceiptData,
    hash_value: str,
    origin: str,
    share_id: Optional[str] = None,
    pix_key: Optional[str] = None,
    pix_payload: Optional[str] = None,
) -> QrCodePayload:
    return QrCodePayload(
        numero=data.numero,
        valor=data.valor,
        data=data.data,
        emitente=data.emitido_por,
        hash=hash_value,
        verify_url=build_verification_url(data.numero, hash_value, origin),
        share_url=build_share_url(share_id, origin) if share_id else None,
        pix_key=pix_key or data.pix_key,
        pix_payload=pix_payload or data.pix_payload,
    )
