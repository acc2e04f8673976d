"""Ledger database model for recorded payment outcomes."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cardpay.common.db import Base


STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
TRANSACTION_STATUSES = frozenset({STATUS_SUCCESS, STATUS_FAILED})


class Transaction(Base):
    """Immutable record of one authorization outcome. Holds no card data."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("status IN ('success', 'failed')", name="ck_transactions_status"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(64))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    status: Mapped[str] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
