"""Configurable fake address validator for development and testing.

Accepts every address by default. Tests switch it to reject with a given
message and inspect ``calls`` to see what was checked.
"""

from takeaway.geo.port import AddressCheck, AddressValidator


class FakeAddressValidator(AddressValidator):
    """Configurable fake address validator."""

    def __init__(self) -> None:
        self.should_accept: bool = True
        self.error: str = "Delivery is not available for this address"
        self.distance_km: float | None = 2.5
        self.calls: list[dict] = []

    def configure(self, should_accept: bool, error: str = "Delivery is not available for this address") -> None:
        self.should_accept = should_accept
        self.error = error

    def validate(self, address: str, zip_code: str | None = None) -> AddressCheck:
        self.calls.append({"address": address, "zip_code": zip_code})

        if self.should_accept:
            return AddressCheck(valid=True, distance_km=self.distance_km)
        return AddressCheck(valid=False, error=self.error)
