"""
Engine, session factory and the per-request session dependency.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from recibos.config import settings


class Base(DeclarativeBase):
    """Declarative base shared by every recibos table."""


def _connect_args(url: str) -> dict:
    # SQLite connections are handed across FastAPI's worker threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


def get_db():
    """Yield a session bound to the current request, closed afterwards."""
    with SessionLocal() as db:
        yield db
