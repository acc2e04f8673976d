"""Authorization seam in front of the payment processor.

`SimulatedAuthorizer` stands in for an external provider. A network-backed
implementation only needs to satisfy `PaymentAuthorizer`.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from cardpay.common.logging import logger
from cardpay.common.metrics import authorization_decisions_total


@dataclass(frozen=True)
class AuthorizationDecision:
    """Binary processor outcome; `reason` is set only on decline."""

    approved: bool
    reason: str | None = None

    @classmethod
    def approve(cls) -> "AuthorizationDecision":
        return cls(approved=True)

    @classmethod
    def decline(cls, reason: str) -> "AuthorizationDecision":
        return cls(approved=False, reason=reason)


class PaymentAuthorizer(Protocol):
    """Synchronous request in, binary decision out, no partial states."""

    def authorize(self, token: str, amount: Decimal, expiry: str, cvv: str) -> AuthorizationDecision: ...


class SimulatedAuthorizer:
    """Deterministic stand-in provider.

    Re-checks its inputs independently of request validation so misuse outside
    the normal pipeline is declined rather than approved.
    """

    def __init__(self, service_name: str = "authorizer") -> None:
        self.service_name = service_name

    def _decline_reason(self, token: str, amount: Decimal, expiry: str, cvv: str) -> str | None:
        if not token:
            return "empty token"
        if amount <= 0:
            return f"invalid amount {amount}"
        if not expiry:
            return "empty expiry"
        if not cvv:
            return "empty CVV"
        if len(cvv) != 3:
            return "invalid CVV length"
        return None

    def authorize(self, token: str, amount: Decimal, expiry: str, cvv: str) -> AuthorizationDecision:
        reason = self._decline_reason(token, amount, expiry, cvv)
        if reason is not None:
            logger.warning("payment declined token=%s amount=%s reason=%s", token, amount, reason)
            authorization_decisions_total.labels(service=self.service_name, decision="declined").inc()
            return AuthorizationDecision.decline(reason)
        logger.info("payment approved token=%s amount=%s", token, amount)
        authorization_decisions_total.labels(service=self.service_name, decision="approved").inc()
        return AuthorizationDecision.approve()
