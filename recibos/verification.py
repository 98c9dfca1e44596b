"""
Recompute the fingerprint of a stored receipt and
compare it with the stored value and, optionally, a value the caller holds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from recibos.errors import HashMissingError, ReceiptNotFoundError
from recibos.pipeline.authenticity import Fingerprinter
from recibos.repository import ReceiptRepository
from recibos.schemas import ReceiptRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    hash_matches: bool
    provided_hash_matches: Optional[bool]
    record: ReceiptRecord


def verify_receipt(
    repository: ReceiptRepository,
    fingerprinter: Fingerprinter,
    numero: str,
    provided_hash: Optional[str] = None,
) -> VerificationResult:
    """Verify the receipt stored under ``numero``.

    ``hash_matches`` catches rows edited after they were stored;
    ``provided_hash_matches`` catches a printed/shared hash that does not
    match the one on file. A failed comparison is a normal result.
    """
    record = repository.find_by_number(numero)
    if record is None:
        raise ReceiptNotFoundError(numero)
    if not record.hash:
        logger.error("Stored receipt %s has no hash", record.numero)
        raise HashMissingError(record.numero)

    hash_matches = fingerprinter.matches(record, record.hash)
    provided_hash_matches = (provided_hash == record.hash) if provided_hash else None
    valid = hash_matches and provided_hash_matches is not False

    if not valid:
        logger.warning(
            "Receipt %s failed verification (hash_matches=%s, provided_hash_matches=%s)",
            record.numero, hash_matches, provided_hash_matches,
        )
    return VerificationResult(
        valid=valid,
        hash_matches=hash_matches,
        provided_hash_matches=provided_hash_matches,
        record=record,
    )
