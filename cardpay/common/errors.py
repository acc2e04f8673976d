"""Error taxonomy for the payment pipeline.

Declines from the authorizer are not errors; they are recorded like approvals.
"""


class CardPayError(Exception):
    """Base class for all service errors."""


class ClientInputError(CardPayError):
    """Request is malformed or fails validation; maps to HTTP 400."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidPaymentError(ClientInputError):
    """One field of a payment request failed validation."""


class ConfigurationError(CardPayError):
    """Required process configuration is missing. Fatal at startup."""


class PersistenceError(CardPayError):
    """The ledger could not durably record a transaction."""
