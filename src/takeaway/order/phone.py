"""French phone number policy for order contacts.

Accepted: ten-digit national numbers ``0X XX XX XX XX`` and the international
form ``+33X XX XX XX XX``, where X is 1-7 (landlines 01-05, mobiles 06-07).
Spaces, dots and dashes between digit groups are ignored. The number is
stored as the customer typed it.
"""

import re

from takeaway.exceptions import InvalidPhoneNumber

_SEPARATORS = re.compile(r"[\s.\-]")
_PHONE = re.compile(r"^(?:0[1-7]\d{8}|\+33[1-7]\d{8})$")


def normalize_phone_number(number: str) -> str:
    return _SEPARATORS.sub("", number or "")


def is_valid_phone_number(number: str | None) -> bool:
    return bool(number) and bool(_PHONE.match(normalize_phone_number(number)))


def check_phone_number(number: str | None) -> None:
    """Raise ``InvalidPhoneNumber`` unless ``number`` is empty or well-formed."""
    if number in (None, ""):
        return
    if not is_valid_phone_number(number):
        raise InvalidPhoneNumber(number)
