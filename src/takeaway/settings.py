"""Restaurant settings — tax rate, delivery pricing and order numbering.

Values are read from the environment once and cached. Tests swap them with
set_settings() / reset_settings().
"""

import os
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RestaurantSettings:
    """Operational parameters of the restaurant."""

    vat_rate: Decimal = Decimal("0.10")
    delivery_fee: Decimal = Decimal("5.00")
    delivery_radius_km: float = 10.0
    order_number_prefix: str = "ORD-"
    restaurant_latitude: float = 43.2965
    restaurant_longitude: float = 5.3698

    @classmethod
    def from_env(cls) -> "RestaurantSettings":
        defaults = cls()
        return cls(
            vat_rate=Decimal(os.environ.get("TAKEAWAY_VAT_RATE", str(defaults.vat_rate))),
            delivery_fee=Decimal(os.environ.get("TAKEAWAY_DELIVERY_FEE", str(defaults.delivery_fee))),
            delivery_radius_km=float(os.environ.get("TAKEAWAY_DELIVERY_RADIUS_KM", defaults.delivery_radius_km)),
            order_number_prefix=os.environ.get("TAKEAWAY_ORDER_PREFIX", defaults.order_number_prefix),
            restaurant_latitude=float(os.environ.get("TAKEAWAY_RESTAURANT_LAT", defaults.restaurant_latitude)),
            restaurant_longitude=float(os.environ.get("TAKEAWAY_RESTAURANT_LNG", defaults.restaurant_longitude)),
        )


_current_settings: RestaurantSettings | None = None


def get_settings() -> RestaurantSettings:
    """Return the active restaurant settings, loading them from the environment on first use."""
    global _current_settings
    if _current_settings is None:
        _current_settings = RestaurantSettings.from_env()
    return _current_settings


def set_settings(settings: RestaurantSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop cached settings so the next read goes back to the environment."""
    global _current_settings
    _current_settings = None
