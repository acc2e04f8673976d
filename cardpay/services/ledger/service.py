"""Append-only transaction ledger."""

import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cardpay.common.errors import PersistenceError
from cardpay.common.logging import logger
from cardpay.common.metrics import ledger_write_failures_total
from cardpay.services.ledger.models import TRANSACTION_STATUSES, Transaction


CENTS = Decimal("0.01")


class TransactionLedger:
    """Records one transaction row per payment and returns its assigned id."""

    def __init__(self, session_factory, service_name: str = "ledger", connect_retries: int = 20) -> None:
        self.session_factory = session_factory
        self.service_name = service_name
        self.connect_retries = connect_retries

    def ensure_ready(self, retry_delay_seconds: float = 1.0) -> None:
        """Check the database answers at startup; retry during cold-start races."""

        for attempt in range(1, self.connect_retries + 1):
            try:
                with self.session_factory() as db:
                    db.execute(text("SELECT 1"))
                    return
            except SQLAlchemyError as exc:
                logger.warning("ledger readiness retry=%s/%s error=%s", attempt, self.connect_retries, exc)
                if attempt == self.connect_retries:
                    raise PersistenceError("database unreachable at startup") from exc
                time.sleep(retry_delay_seconds)

    def record(self, token: str, amount: Decimal, status: str) -> int:
        """Insert one row in its own transaction.

        Raises `PersistenceError` when the insert does not commit; in that case
        no row exists.
        """

        if status not in TRANSACTION_STATUSES:
            raise ValueError(f"unknown transaction status: {status}")
        try:
            row = Transaction(token=token, amount=amount.quantize(CENTS, rounding=ROUND_HALF_UP), status=status)
            with self.session_factory() as db:
                db.add(row)
                db.commit()
                return row.id
        except (SQLAlchemyError, InvalidOperation) as exc:
            ledger_write_failures_total.labels(service=self.service_name).inc()
            logger.error("failed to store transaction token=%s status=%s error=%s", token, status, exc)
            raise PersistenceError("transaction insert failed") from exc
