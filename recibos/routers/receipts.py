"""
Receipt API endpoints.

POST /api/recibos/assinatura         — validate, sign and store a receipt
GET  /api/recibos/{numero}?hash=     — verify a receipt by number
GET  /api/recibos/share/{share_id}   — public receipt view by share id
POST /api/pix                        — build a static PIX payment code
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from recibos.config import Settings, settings
from recibos.database import get_db
from recibos.errors import (
    HashMissingError,
    PaymentCodeError,
    ReceiptError,
    ReceiptNotFoundError,
    ReceiptValidationError,
)
from recibos.pipeline import prepare_receipt, sign_receipt
from recibos.pipeline.authenticity import Fingerprinter
from recibos.pipeline.pix import build_payment_code, crc16, has_valid_checksum
from recibos.pipeline.qr_payload import build_qr_payload, build_share_url
from recibos.repository import ReceiptRepository
from recibos.schemas import (
    PixRequest,
    PixResponse,
    ReceiptInput,
    VerifiedReceipt,
    VerifyResponse,
)
from recibos.verification import verify_receipt

logger = logging.getLogger(__name__)
router = APIRouter()


def get_settings() -> Settings:
    return settings


def get_fingerprinter(cfg: Settings = Depends(get_settings)) -> Fingerprinter:
    return Fingerprinter(cfg)


def _origin(request: Request, cfg: Settings) -> str:
    return request.headers.get("origin") or cfg.APP_BASE_URL


# ── POST /api/recibos/assinatura ─────────────────────────────────────────
@router.post("/recibos/assinatura")
def sign_and_store(
    req: ReceiptInput,
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
    fingerprinter: Fingerprinter = Depends(get_fingerprinter),
):
    try:
        data = prepare_receipt(req, cfg)
    except ReceiptValidationError as exc:
        return JSONResponse(
            status_code=400, content={"error": exc.code, "errors": exc.errors}
        )

    try:
        saved = ReceiptRepository(db, fingerprinter).issue(data)
    except ReceiptError as exc:
        return JSONResponse(status_code=500, content={"error": exc.code})

    signed = sign_receipt(data, fingerprinter, _origin(request, cfg), share_id=saved.share_id)
    return signed.model_dump(by_alias=True, exclude_none=True, mode="json")


# ── GET /api/recibos/share/{share_id} ────────────────────────────────────
@router.get("/recibos/share/{share_id}")
def get_shared_receipt(
    share_id: str,
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
    fingerprinter: Fingerprinter = Depends(get_fingerprinter),
):
    logger.info("Fetching shared receipt: %s", share_id)
    try:
        record = ReceiptRepository(db, fingerprinter).find_by_share(share_id)
        if record is None:
            raise ReceiptNotFoundError(share_id)
        if not record.hash:
            logger.error("Shared receipt %s has no hash", record.numero)
            raise HashMissingError(record.numero)
    except ReceiptNotFoundError:
        logger.warning("Shared receipt not found: %s", share_id)
        return JSONResponse(status_code=404, content={"error": "NOT_FOUND"})
    except ReceiptError:
        return JSONResponse(status_code=500, content={"error": "INTERNAL_ERROR"})

    qr_payload = build_qr_payload(
        record, record.hash, _origin(request, cfg), share_id=record.share_id
    )
    return {
        "recibo": record.model_dump(
            by_alias=True, exclude={"hash"}, exclude_none=True, mode="json"
        ),
        "qrPayload": qr_payload.model_dump(by_alias=True, exclude_none=True, mode="json"),
    }


# ── GET /api/recibos/{numero} ────────────────────────────────────────────
@router.get("/recibos/{numero}")
def verify(
    numero: str,
    request: Request,
    hash: Optional[str] = None,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
    fingerprinter: Fingerprinter = Depends(get_fingerprinter),
):
    logger.info("Verifying receipt: %s", numero)
    repository = ReceiptRepository(db, fingerprinter)
    try:
        result = verify_receipt(repository, fingerprinter, numero, provided_hash=hash)
    except ReceiptNotFoundError:
        logger.warning("Receipt not found: %s", numero)
        return JSONResponse(status_code=404, content={"valid": False, "reason": "NOT_FOUND"})
    except ReceiptError as exc:
        logger.error("Verification of %s failed: %s", numero, exc.code)
        return JSONResponse(status_code=500, content={"valid": False, "reason": "INTERNAL_ERROR"})

    record = result.record
    body = VerifyResponse(
        valid=result.valid,
        hash_matches=result.hash_matches,
        provided_hash_matches=result.provided_hash_matches,
        recibo=VerifiedReceipt(
            **record.model_dump(exclude={"pix_key", "pix_payload"}),
            share_url=build_share_url(record.share_id, _origin(request, cfg)),
        ),
    )
    return body.model_dump(by_alias=True, exclude_none=True, mode="json")


# ── POST /api/pix ────────────────────────────────────────────────────────
@router.post("/pix", response_model=PixResponse)
def build_pix(req: PixRequest, cfg: Settings = Depends(get_settings)):
    try:
        payload = build_payment_code(
            key=req.key,
            amount=req.amount,
            merchant_name=req.merchant_name or cfg.PIX_MERCHANT_NAME,
            merchant_city=req.merchant_city or cfg.PIX_MERCHANT_CITY,
            tx_id=req.tx_id or "",
        )
    except PaymentCodeError as exc:
        return JSONResponse(status_code=400, content={"error": exc.code, "errors": [str(exc)]})
    return PixResponse(payload=payload, crc=crc16(payload[:-4]), valid=has_valid_checksum(payload))
