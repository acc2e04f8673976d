"""Payment intake orchestration.

Runs validate -> tokenize -> authorize -> record for one request and maps the
result to a client-facing outcome. Approvals and declines are both recorded;
only the stored status differs.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from cardpay.common import state_machine
from cardpay.common.errors import InvalidPaymentError, PersistenceError
from cardpay.common.logging import logger
from cardpay.common.metrics import (
    payment_failure_total,
    payment_success_total,
    validation_rejections_total,
)
from cardpay.common.tracing import pipeline_span
from cardpay.services.authorizer.service import PaymentAuthorizer
from cardpay.services.ledger.models import STATUS_FAILED, STATUS_SUCCESS
from cardpay.services.ledger.service import TransactionLedger
from cardpay.services.payments.tokenizer import CardTokenizer
from cardpay.services.payments.validator import validate_payment


OUTCOME_SUCCESS = "success"
OUTCOME_CLIENT_ERROR = "client_error"
OUTCOME_SERVER_ERROR = "server_error"

_STATUS_CODES = {OUTCOME_SUCCESS: 200, OUTCOME_CLIENT_ERROR: 400, OUTCOME_SERVER_ERROR: 500}

# Returned when no row was written.
SENTINEL_TRANSACTION_ID = 0


@dataclass(frozen=True)
class PaymentOutcome:
    """What the caller is told about one payment request."""

    kind: str
    message: str
    transaction_id: int = SENTINEL_TRANSACTION_ID

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    @property
    def confirmed(self) -> bool:
        return self.kind == OUTCOME_SUCCESS


class _RequestFlow:
    """Tracks one request through the pipeline states."""

    def __init__(self) -> None:
        self.state = state_machine.RECEIVED

    def advance(self, new_state: str) -> None:
        state_machine.validate_transition(self.state, new_state)
        self.state = new_state


class PaymentService:
    """Owns the per-request pipeline; holds no per-request state itself."""

    def __init__(
        self,
        tokenizer: CardTokenizer,
        authorizer: PaymentAuthorizer,
        ledger: TransactionLedger,
        service_name: str = "payments",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tokenizer = tokenizer
        self.authorizer = authorizer
        self.ledger = ledger
        self.service_name = service_name
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def process(self, request) -> PaymentOutcome:
        """Handle one payment request end to end."""

        flow = _RequestFlow()
        try:
            with pipeline_span("validate"):
                payment = validate_payment(request, now=self.clock())
        except InvalidPaymentError as exc:
            flow.advance(state_machine.RESPONDED)
            logger.info("payment rejected reason=%s", exc.reason)
            validation_rejections_total.labels(service=self.service_name, reason=exc.reason).inc()
            return PaymentOutcome(kind=OUTCOME_CLIENT_ERROR, message=exc.reason)
        flow.advance(state_machine.VALIDATED)

        with pipeline_span("tokenize"):
            token = self.tokenizer.tokenize(payment.card_number)
        flow.advance(state_machine.TOKENIZED)

        with pipeline_span("authorize") as span:
            decision = self.authorizer.authorize(token, payment.amount, payment.expiry, payment.cvv)
            span.set_attribute("payment.approved", decision.approved)
        flow.advance(state_machine.AUTHORIZED)

        status = STATUS_SUCCESS if decision.approved else STATUS_FAILED
        try:
            with pipeline_span("record", status=status):
                transaction_id = self.ledger.record(token, payment.amount, status)
        except PersistenceError:
            flow.advance(state_machine.RESPONDED)
            payment_failure_total.labels(service=self.service_name, outcome="persistence_error").inc()
            return PaymentOutcome(kind=OUTCOME_SERVER_ERROR, message="Payment failed")
        flow.advance(state_machine.RECORDED)

        logger.info(
            "payment processed token=%s amount=%s status=%s transaction_id=%s",
            token,
            payment.amount,
            status,
            transaction_id,
        )
        flow.advance(state_machine.RESPONDED)
        if decision.approved:
            payment_success_total.labels(service=self.service_name).inc()
            return PaymentOutcome(kind=OUTCOME_SUCCESS, message="Payment successful", transaction_id=transaction_id)
        payment_failure_total.labels(service=self.service_name, outcome="declined").inc()
        return PaymentOutcome(
            kind=OUTCOME_SERVER_ERROR,
            message=f"Payment declined: {decision.reason}",
            transaction_id=transaction_id,
        )
