"""
Receipt record store.

One row per receipt number. Re-issuing a number overwrites its content and
hash but keeps the share id handed out on first issuance.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recibos.errors import StoreUnavailableError
from recibos.models.receipt import ReceiptModel
from recibos.pipeline.authenticity import Fingerprinter
from recibos.schemas import ReceiptData, ReceiptRecord

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@dataclass(frozen=True)
class IssueResult:
    share_id: str
    hash: str
    created: bool


class ReceiptRepository:
    """Create-or-update and lookups for receipt records."""

    def __init__(self, db: Session, fingerprinter: Fingerprinter):
        self._db = db
        self._fingerprinter = fingerprinter

    # ── writes ───────────────────────────────────────────────────────────
    def issue(self, data: ReceiptData) -> IssueResult:
        """Upsert ``data`` keyed by its number and return the resolved share id.

        Two first-time issuances of the same unseen number racing each other
        may mint different share ids; the row ends up with whichever upsert
        commits last.
        """
        try:
            existing_share_id = (
                self._db.query(ReceiptModel.share_id)
                .filter(ReceiptModel.numero == data.numero)
                .scalar()
            )
            share_id = existing_share_id or str(uuid.uuid4())
            hash_value = self._fingerprinter.fingerprint(data)
            now = datetime.now(timezone.utc)

            values = data.model_dump()
            values.update(hash=hash_value, share_id=share_id, updated_at=now)
            self._upsert(values, created_at=now)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Failed to save receipt %s", data.numero)
            raise StoreUnavailableError("Não foi possível salvar o recibo") from exc

        created = existing_share_id is None
        logger.info(
            "%s receipt %s (share_id=%s)",
            "Created" if created else "Updated", data.numero, share_id,
        )
        return IssueResult(share_id=share_id, hash=hash_value, created=created)

    def _upsert(self, values: dict, created_at: datetime) -> None:
        insert = _UPSERT_INSERTS.get(self._db.get_bind().dialect.name)
        if insert is not None:
            stmt = insert(ReceiptModel).values(**values, created_at=created_at)
            stmt = stmt.on_conflict_do_update(index_elements=["numero"], set_=values)
            self._db.execute(stmt)
            return

        row = self._db.query(ReceiptModel).filter(ReceiptModel.numero == values["numero"]).first()
        if row is None:
            self._db.add(ReceiptModel(**values, created_at=created_at))
        else:
            for key, value in values.items():
                setattr(row, key, value)

    # ── reads ────────────────────────────────────────────────────────────
    def find_by_number(self, numero: str) -> Optional[ReceiptRecord]:
        if not numero or not numero.strip():
            return None
        return self._find_one(ReceiptModel.numero == numero.strip(), numero)

    def find_by_share(self, share_id: str) -> Optional[ReceiptRecord]:
        if not share_id or not share_id.strip():
            return None
        return self._find_one(ReceiptModel.share_id == share_id.strip(), share_id)

    def _find_one(self, criterion, key: str) -> Optional[ReceiptRecord]:
        try:
            row = self._db.query(ReceiptModel).filter(criterion).first()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Failed to look up receipt %s", key)
            raise StoreUnavailableError("Erro ao buscar recibo no banco de dados") from exc
        if row is None:
            return None
        return to_record(row)


def to_record(row: ReceiptModel) -> ReceiptRecord:
    """Map a row to ``ReceiptRecord``; the surrogate primary key is dropped."""
    return ReceiptRecord(
        **{name: getattr(row, name) for name in ReceiptRecord.model_fields}
    )
