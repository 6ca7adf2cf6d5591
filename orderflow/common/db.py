"""Database bootstrap helpers shared by both services."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from orderflow.common.config import settings


# Single SQLAlchemy engine per process.
engine = create_engine(settings.postgres_dsn, pool_pre_ping=True)
# `expire_on_commit=False` keeps ORM objects readable after commit in handlers.
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""

    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_timestamp(previous: datetime | None) -> datetime:
    """Return "now", nudged forward so it is strictly later than `previous`."""

    now = utcnow()
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def get_db():
    """FastAPI dependency yielding one session per request."""

    with SessionLocal() as db:
        yield db
