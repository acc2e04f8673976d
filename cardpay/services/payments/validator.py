"""Pure validation rules for incoming card payments.

Nothing here performs I/O. The current time is passed in so expiry checks are
reproducible in tests.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from cardpay.common.errors import InvalidPaymentError


INVALID_CARD = "Invalid card number"
INVALID_EXPIRY = "Invalid expiry date"
INVALID_CVV = "Invalid CVV"
INVALID_AMOUNT = "Invalid amount"

CARD_NUMBER_LENGTH = 16

_WHITESPACE = re.compile(r"\s+")
_EXPIRY = re.compile(r"([0-9]{2})/([0-9]{2})")
_CVV = re.compile(r"[0-9]{3}")

CENTS = Decimal("0.01")
# Largest value a NUMERIC(10,2) column holds.
MAX_AMOUNT = Decimal("99999999.99")


@dataclass(frozen=True)
class ValidatedPayment:
    """Request fields that passed validation, card number normalized."""

    card_number: str
    expiry: str
    cvv: str
    amount: Decimal


def normalize_card_number(card_number: str) -> str:
    return _WHITESPACE.sub("", card_number)


def luhn_checksum_ok(digits: str) -> bool:
    """Standard mod-10 check over an all-digit string."""

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_card_number(card_number: str) -> bool:
    digits = normalize_card_number(card_number)
    if len(digits) != CARD_NUMBER_LENGTH or not (digits.isascii() and digits.isdigit()):
        return False
    return luhn_checksum_ok(digits)


def is_valid_expiry(expiry: str, now: datetime | None = None) -> bool:
    """Accept `MM/YY` from the current month onward.

    Years are compared as two-digit values with no century correction, so
    `01/00` is treated as already expired in 2099.
    """

    match = _EXPIRY.fullmatch(expiry)
    if match is None:
        return False
    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return False
    now = now or datetime.now(timezone.utc)
    current_year = now.year % 100
    if year > current_year:
        return True
    return year == current_year and month >= now.month


def is_valid_cvv(cvv: str) -> bool:
    return _CVV.fullmatch(cvv) is not None


def is_valid_amount(amount: Decimal) -> bool:
    """Positive, whole cents, and small enough for the ledger column."""

    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        return False
    return amount == amount.quantize(CENTS)


def validate_payment(request, now: datetime | None = None) -> ValidatedPayment:
    """Check every field of `request`, first failure wins.

    Raises `InvalidPaymentError` carrying the human-readable reason.
    """

    if not is_valid_card_number(request.card_number):
        raise InvalidPaymentError(INVALID_CARD)
    if not is_valid_expiry(request.expiry, now):
        raise InvalidPaymentError(INVALID_EXPIRY)
    if not is_valid_cvv(request.cvv):
        raise InvalidPaymentError(INVALID_CVV)
    if not is_valid_amount(request.amount):
        raise InvalidPaymentError(INVALID_AMOUNT)
    return ValidatedPayment(
        card_number=normalize_card_number(request.card_number),
        expiry=request.expiry,
        cvv=request.cvv,
        amount=request.amount,
    )
