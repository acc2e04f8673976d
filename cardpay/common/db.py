"""Engine and session construction for the transaction ledger."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from cardpay.common.config import settings


def make_engine(dsn: str) -> Engine:
    """Build the process engine; its pool is the only resource shared across requests.

    In-memory SQLite (local runs and tests) needs one connection shared by all
    threads, otherwise each pooled connection sees an empty database.
    """

    url = make_url(dsn)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(bind: Engine) -> sessionmaker:
    # `expire_on_commit=False` keeps the assigned transaction id readable after commit.
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, expire_on_commit=False)


engine = make_engine(settings.postgres_dsn)
SessionLocal = make_session_factory(engine)


class Base(DeclarativeBase):
    """Declarative base for ledger models."""
