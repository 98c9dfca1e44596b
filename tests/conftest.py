"""
Shared pytest fixtures — in‑memory SQLite + FastAPI TestClient.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recibos.config import Settings
from recibos.database import Base, get_db
from recibos.models import ReceiptModel  # noqa: F401  — register model
from recibos.main import app
from recibos.pipeline.authenticity import Fingerprinter
from recibos.repository import ReceiptRepository
from recibos.routers.receipts import get_settings
from recibos.schemas import ReceiptData

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)

TEST_SECRET = "test-secret"


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def engine():
    return _ENGINE


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def settings():
    return Settings(
        _env_file=None,
        HASH_SECRET=TEST_SECRET,
        APP_BASE_URL="https://recibos.example.com",
    )


@pytest.fixture()
def fingerprinter(settings):
    return Fingerprinter(settings)


@pytest.fixture()
def repository(db, fingerprinter):
    return ReceiptRepository(db, fingerprinter)


@pytest.fixture()
def receipt_data(settings):
    return ReceiptData(
        numero="REC-0001",
        valor=500.0,
        valor_extenso="quinhentos reais",
        recebido_de="Lívia Martinez",
        cpf_cnpj="111.444.777-35",
        referente="Parcela 1 do lote Pôr do Sol Eco Village",
        data=date.today().isoformat(),
        forma_pagamento="PIX",
        emitido_por=settings.EMISSOR_NOME,
        cpf_emitente=settings.EMISSOR_CNPJ,
        endereco_emitente=settings.EMPRESA_ENDERECO,
        telefone_emitente=settings.EMPRESA_TELEFONE,
        email_emitente=settings.EMPRESA_EMAIL,
    )


@pytest.fixture()
def receipt_payload():
    """Raw request body for POST /api/recibos/assinatura."""
    return {
        "numero": "rec-0001",
        "valor": 500,
        "recebidoDe": "Lívia Martinez",
        "cpfCnpj": "111.444.777-35",
        "referente": "Parcela 1 do lote Pôr do Sol Eco Village",
        "data": date.today().isoformat(),
        "formaPagamento": "PIX",
    }


@pytest.fixture()
def client(db, settings):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
