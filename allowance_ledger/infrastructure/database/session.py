"""Database session management"""

from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from allowance_ledger.config import settings
from allowance_ledger.infrastructure.database.models import Base


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Requests are served from a thread pool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 5,
        "max_overflow": 5,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create tables that do not exist yet"""
    Base.metadata.create_all(bind=engine)


def check_db(db: Session) -> bool:
    """Round-trip a trivial query to verify storage is reachable"""
    db.execute(text("SELECT 1"))
    return True


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
