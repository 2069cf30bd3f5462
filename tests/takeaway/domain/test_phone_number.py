"""Tests for the order contact phone policy."""

import pytest
from takeaway.exceptions import InvalidPhoneNumber
from takeaway.order.phone import check_phone_number, is_valid_phone_number


@pytest.mark.parametrize(
    "number",
    [
        "0612345678",
        "+33612345678",
        "0123456789",
        "0712345678",
        "06 12 34 56 78",
        "06.12.34.56.78",
        "06-12-34-56-78",
        "+33 6 12 34 56 78",
    ],
)
def test_accepts_french_numbers(number):
    assert is_valid_phone_number(number)
    check_phone_number(number)


@pytest.mark.parametrize(
    "number",
    ["12345", "0812345678", "0012345678", "061234567", "06123456789", "+3361234567", "+44612345678", "06a2345678"],
)
def test_rejects_malformed_numbers(number):
    with pytest.raises(InvalidPhoneNumber) as exc:
        check_phone_number(number)
    assert "client_phone" in exc.value.messages


def test_missing_number_is_allowed():
    check_phone_number(None)
    check_phone_number("")
