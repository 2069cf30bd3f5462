"""Address validator factory.

Provides get_address_validator() / set_address_validator() to swap
implementations:
- ZoneAddressValidator (default) checks postal codes against the delivery radius
- FakeAddressValidator for development and testing

The default is chosen with the ADDRESS_VALIDATOR environment variable.
"""

import os

from takeaway.geo.fake_adapter import FakeAddressValidator
from takeaway.geo.port import AddressCheck, AddressValidator
from takeaway.geo.zone_adapter import ZoneAddressValidator

__all__ = [
    "AddressCheck",
    "AddressValidator",
    "get_address_validator",
    "reset_address_validator",
    "set_address_validator",
]

_current_validator: AddressValidator | None = None


def get_address_validator() -> AddressValidator:
    """Return the current address validator."""
    global _current_validator
    if _current_validator is None:
        adapter = os.environ.get("ADDRESS_VALIDATOR", "zone")
        if adapter == "zone":
            _current_validator = ZoneAddressValidator()
        elif adapter == "fake":
            _current_validator = FakeAddressValidator()
        else:
            raise ValueError(f"Unknown address validator: {adapter}")
    return _current_validator


def set_address_validator(validator: AddressValidator) -> None:
    """Override the active address validator (useful for tests)."""
    global _current_validator
    _current_validator = validator


def reset_address_validator() -> None:
    """Reset to the configured default."""
    global _current_validator
    _current_validator = None
