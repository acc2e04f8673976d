"""Table-driven tests for payment request validation."""

import random
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from cardpay.common.errors import ClientInputError, InvalidPaymentError
from cardpay.services.payments.validator import (
    INVALID_AMOUNT,
    INVALID_CARD,
    INVALID_CVV,
    INVALID_EXPIRY,
    is_valid_amount,
    is_valid_card_number,
    is_valid_cvv,
    is_valid_expiry,
    validate_payment,
)


FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "card_number,expected",
    [
        ("4539148803436467", True),
        ("4539148803436468", False),
        ("4539 1488 0343 6467", True),
        (" 4539148803436467\t", True),
        ("4111111111111111", True),
        ("5555555555554444", True),
        ("4012888888881881", True),
        ("453914880343646", False),
        ("45391488034364670", False),
        ("4539a48803436467", False),
        ("4539-1488-0343-6467", False),
        ("", False),
    ],
)
def test_card_number(card_number, expected):
    assert is_valid_card_number(card_number) is expected


def _reference_luhn(digits: str) -> bool:
    doubled = [0, 2, 4, 6, 8, 1, 3, 5, 7, 9]
    total = sum(
        doubled[int(d)] if i % 2 else int(d)
        for i, d in enumerate(reversed(digits))
    )
    return total % 10 == 0


def test_card_number_matches_reference_checksum():
    """Any 16-digit sequence is accepted exactly when the mod-10 sum holds."""

    rng = random.Random(1234)
    for _ in range(2000):
        digits = "".join(rng.choice("0123456789") for _ in range(16))
        assert is_valid_card_number(digits) is _reference_luhn(digits)


@pytest.mark.parametrize(
    "expiry,expected",
    [
        ("10/26", True),
        ("11/26", True),
        ("01/27", True),
        ("12/99", True),
        ("09/26", False),
        ("12/25", False),
        ("13/25", False),
        ("13/27", False),
        ("00/27", False),
        ("1/27", False),
        ("01/2027", False),
        ("01-27", False),
        ("12/27\n", False),
        ("\u0661\u0662/\u0662\u0667", False),
        ("", False),
    ],
)
def test_expiry_relative_to_now(expiry, expected):
    assert is_valid_expiry(expiry, now=FIXED_NOW) is expected


def test_expiry_has_no_century_correction():
    """Two-digit years compare literally: `01/00` is in the past in 2099."""

    late_century = datetime(2099, 6, 1, tzinfo=timezone.utc)
    assert is_valid_expiry("01/00", now=late_century) is False
    assert is_valid_expiry("06/99", now=late_century) is True


def test_expiry_current_month_accepted_previous_rejected():
    now = datetime(2027, 1, 15, tzinfo=timezone.utc)
    assert is_valid_expiry("01/27", now=now) is True
    assert is_valid_expiry("12/26", now=now) is False


@pytest.mark.parametrize(
    "cvv,expected",
    [
        ("123", True),
        ("000", True),
        ("12", False),
        ("1234", False),
        ("abcd", False),
        ("12a", False),
        ("", False),
        ("123\n", False),
        ("\u0661\u0662\u0663", False),
    ],
)
def test_cvv(cvv, expected):
    assert is_valid_cvv(cvv) is expected


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("100.00"), True),
        (Decimal("0.01"), True),
        (Decimal("99999999.99"), True),
        (Decimal("100.10"), True),
        (Decimal("100.100"), True),
        (Decimal("0.001"), False),
        (Decimal("100.001"), False),
        (Decimal("100000000.00"), False),
        (Decimal("1E+30"), False),
        (Decimal("0"), False),
        (Decimal("-5.00"), False),
        (Decimal("Infinity"), False),
        (Decimal("NaN"), False),
    ],
)
def test_amount(amount, expected):
    assert is_valid_amount(amount) is expected


def test_validate_payment_normalizes_card_number(make_request):
    payment = validate_payment(make_request(card_number="4539 1488 0343 6467"), now=FIXED_NOW)

    assert payment.card_number == "4539148803436467"
    assert payment.expiry == "12/27"
    assert payment.cvv == "123"
    assert payment.amount == Decimal("100.00")


@pytest.mark.parametrize(
    "overrides,reason",
    [
        ({"card_number": "4539148803436468"}, INVALID_CARD),
        ({"expiry": "13/25"}, INVALID_EXPIRY),
        ({"cvv": "12"}, INVALID_CVV),
        ({"amount": Decimal("0")}, INVALID_AMOUNT),
        ({"amount": Decimal("-5.00")}, INVALID_AMOUNT),
        ({"cvv": "123\n"}, INVALID_CVV),
        ({"expiry": "12/27\n"}, INVALID_EXPIRY),
        ({"amount": Decimal("0.001")}, INVALID_AMOUNT),
        ({"amount": Decimal("1E+30")}, INVALID_AMOUNT),
        # First failing field wins.
        ({"card_number": "1", "cvv": "x"}, INVALID_CARD),
        ({"expiry": "bad", "amount": Decimal("0")}, INVALID_EXPIRY),
    ],
)
def test_validate_payment_reports_reason(make_request, overrides, reason):
    with pytest.raises(InvalidPaymentError) as excinfo:
        validate_payment(make_request(**overrides), now=FIXED_NOW)

    assert excinfo.value.reason == reason
    assert isinstance(excinfo.value, ClientInputError)
