"""Address validator port (abstract interface).

Delivery fulfillment only needs a yes/no answer, an error message to show
the customer, and optionally how far away the address is. Adapters decide
how they get there.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AddressCheck:
    """Result of an address validation attempt."""

    valid: bool
    error: str | None = None
    distance_km: float | None = None


class AddressValidator(ABC):
    """Abstract address validator interface."""

    @abstractmethod
    def validate(self, address: str, zip_code: str | None = None) -> AddressCheck:
        """Decide whether the restaurant delivers to ``address``."""
        ...
