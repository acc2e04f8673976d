"""API request/response schemas for the payment endpoint."""

from decimal import Decimal

from pydantic import BaseModel


class PaymentRequest(BaseModel):
    """Card payment payload accepted by `POST /api/payments`.

    Field rules (Luhn, expiry, CVV, positive amount) are enforced by the
    validator so failures carry a specific reason instead of a schema error.
    """

    card_number: str
    expiry: str
    cvv: str
    amount: Decimal


class PaymentResponse(BaseModel):
    """Message plus assigned transaction id (0 when nothing was recorded)."""

    message: str
    transaction_id: int
