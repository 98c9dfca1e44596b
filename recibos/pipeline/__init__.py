"""
Receipt issuance pipeline.

Orchestrates: sanitize → validate → payment code → fingerprint → QR payload.
Nothing here touches the database; persistence is the caller's next step.
"""
import logging
from typing import Optional

from recibos.config import Settings
from recibos.errors import PaymentCodeError, ReceiptValidationError
from recibos.pipeline.authenticity import Fingerprinter
from recibos.pipeline.pix import build_payment_code
from recibos.pipeline.qr_payload import build_qr_payload
from recibos.pipeline.sanitizer import sanitize_receipt_data
from recibos.pipeline.validators import validate_receipt_data
from recibos.schemas import IssueResponse, ReceiptData, ReceiptInput

logger = logging.getLogger(__name__)


def prepare_receipt(payload: ReceiptInput, settings: Settings) -> ReceiptData:
    """Sanitize and validate raw input.

    Raises ``ReceiptValidationError`` carrying every field-level message.
    """
    data, amount_is_numeric = sanitize_receipt_data(payload, settings)
    errors = validate_receipt_data(data, amount_is_numeric=amount_is_numeric)
    if errors:
        logger.info("Receipt %s rejected: %d validation errors", data.numero, len(errors))
        raise ReceiptValidationError(errors)

    if data.pix_key and not data.pix_payload:
        try:
            code = build_payment_code(
                key=data.pix_key,
                amount=data.valor,
                merchant_name=settings.PIX_MERCHANT_NAME,
                merchant_city=settings.PIX_MERCHANT_CITY,
                tx_id=data.numero,
            )
        except PaymentCodeError as exc:
            raise ReceiptValidationError([str(exc)]) from exc
        data = data.model_copy(update={"pix_payload": code})
        logger.info("Built PIX payload for receipt %s", data.numero)

    return data


def sign_receipt(
    data: ReceiptData,
    fingerprinter: Fingerprinter,
    origin: str,
    share_id: Optional[str] = None,
) -> IssueResponse:
    """Fingerprint ``data`` and assemble its QR payload.

    Returns ``IssueResponse(hash, qr_payload)``.
    """
    hash_value = fingerprinter.fingerprint(data)
    qr_payload = build_qr_payload(data, hash_value, origin, share_id=share_id)
    logger.info("Signed receipt %s", data.numero)
    return IssueResponse(hash=hash_value, qr_payload=qr_payload)
