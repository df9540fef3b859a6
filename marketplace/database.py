"""Database engine, session factory and the declarative base."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from marketplace.config import get_settings

settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """Engine for ``database_url``. SQLite gets a single-file setup without pooling options."""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = build_engine(settings.database_url)

# Writes are flushed explicitly where ids are needed before commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session, closed when the request ends."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables. Deployments use Alembic; scripts and local runs use this."""
    from marketplace import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
