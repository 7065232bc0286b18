"""SQLAlchemy engine, session factory and transaction helpers."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Commit the block's work, or roll it back and re-raise on any failure."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def upsert_insert(db: Session, model):
    """Return a dialect ``insert`` construct supporting ``ON CONFLICT`` clauses."""
    dialect_name = db.get_bind().dialect.name
    factory = _UPSERT_DIALECTS.get(dialect_name)
    if factory is None:
        raise RuntimeError(f"ON CONFLICT upserts are not supported for dialect '{dialect_name}'")
    return factory(model)
