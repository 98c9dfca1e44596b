"""
SQLAlchemy model for receipt persistence.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from recibos.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReceiptModel(Base):
    """One row per receipt number."""
    __tablename__ = "recibos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    numero = Column(String(32), nullable=False, unique=True, index=True)
    share_id = Column(String(36), nullable=False, unique=True, index=True)

    # Receipt content
    valor = Column(Float, nullable=False)
    valor_extenso = Column(Text, nullable=False)
    recebido_de = Column(String, nullable=False)
    cpf_cnpj = Column(String, nullable=False)
    referente = Column(Text, nullable=False)
    data = Column(String(10), nullable=False)
    forma_pagamento = Column(String, nullable=False)

    # Issuer
    emitido_por = Column(String, nullable=False)
    cpf_emitente = Column(String, nullable=False)
    endereco_emitente = Column(String, nullable=False)
    telefone_emitente = Column(String, nullable=False)
    email_emitente = Column(String, nullable=False)

    # PIX (optional)
    pix_key = Column(String)
    pix_payload = Column(Text)

    hash = Column(String(64))

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
