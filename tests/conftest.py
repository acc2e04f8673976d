"""Shared fixtures: in-memory SQLite ledger and a wired payment pipeline."""

import os

# Settings are read at import time; keep tests off real infrastructure.
os.environ.setdefault("POSTGRES_DSN", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("TRACING_ENABLED", "false")

from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from cardpay.common.db import Base, make_engine, make_session_factory  # noqa: E402
from cardpay.services.authorizer.service import SimulatedAuthorizer  # noqa: E402
from cardpay.services.ledger.service import TransactionLedger  # noqa: E402
from cardpay.services.payments.schemas import PaymentRequest  # noqa: E402
from cardpay.services.payments.service import PaymentService  # noqa: E402
from cardpay.services.payments.tokenizer import CardTokenizer  # noqa: E402


FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
VALID_CARD = "4539148803436467"


@pytest.fixture
def engine():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def ledger(session_factory):
    return TransactionLedger(session_factory, connect_retries=1)


@pytest.fixture
def tokenizer():
    return CardTokenizer("test-secret")


@pytest.fixture
def build_service(tokenizer, ledger):
    """Wire a pipeline with a fixed clock, replacing any collaborator."""

    def _build(**overrides):
        parts = {"tokenizer": tokenizer, "authorizer": SimulatedAuthorizer(), "ledger": ledger}
        parts.update(overrides)
        return PaymentService(parts["tokenizer"], parts["authorizer"], parts["ledger"], clock=lambda: FIXED_NOW)

    return _build


@pytest.fixture
def payment_service(build_service):
    return build_service()


@pytest.fixture
def make_request():
    """Build a valid request, overriding individual fields."""

    def _make(**overrides):
        fields = {"card_number": VALID_CARD, "expiry": "12/27", "cvv": "123", "amount": Decimal("100.00")}
        fields.update(overrides)
        return PaymentRequest(**fields)

    return _make
