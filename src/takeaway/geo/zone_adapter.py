"""Delivery-zone address validator.

Resolves a French postal code to coordinates from a local table and accepts
the address when the great-circle distance to the restaurant is within the
configured delivery radius. The postal code comes from the zip field when
given, otherwise from the first five-digit group in the address text.
"""

import math
import re

import structlog

from takeaway.geo.port import AddressCheck, AddressValidator
from takeaway.settings import get_settings

logger = structlog.get_logger(__name__)

EARTH_RADIUS_KM = 6371.0

_ZIP_IN_ADDRESS = re.compile(r"\b(\d{5})\b")

# (latitude, longitude) of the postal code's centre
POSTAL_CODE_COORDINATES: dict[str, tuple[float, float]] = {
    "13001": (43.2999, 5.3841),
    "13002": (43.3127, 5.3660),
    "13003": (43.3120, 5.3800),
    "13004": (43.3064, 5.4008),
    "13005": (43.2925, 5.3975),
    "13006": (43.2870, 5.3810),
    "13007": (43.2826, 5.3629),
    "13008": (43.2413, 5.3829),
    "13009": (43.2340, 5.4350),
    "13010": (43.2760, 5.4260),
    "13011": (43.2890, 5.4840),
    "13012": (43.3070, 5.4420),
    "13013": (43.3490, 5.4330),
    "13014": (43.3450, 5.3920),
    "13015": (43.3590, 5.3640),
    "13016": (43.3630, 5.3130),
    "13100": (43.5297, 5.4474),
    "13127": (43.4100, 5.3100),
    "13400": (43.2927, 5.5708),
    "13600": (43.1748, 5.6046),
    "69001": (45.7675, 4.8345),
    "75001": (48.8625, 2.3363),
}


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def extract_zip_code(address: str | None) -> str | None:
    match = _ZIP_IN_ADDRESS.search(address or "")
    return match.group(1) if match else None


class ZoneAddressValidator(AddressValidator):
    """Radius check around the restaurant using known postal-code coordinates."""

    def __init__(self, coordinates: dict[str, tuple[float, float]] | None = None) -> None:
        self.coordinates = coordinates if coordinates is not None else POSTAL_CODE_COORDINATES

    def validate(self, address: str, zip_code: str | None = None) -> AddressCheck:
        if zip_code:
            return self.validate_zip_code(zip_code)

        extracted = extract_zip_code(address)
        if extracted is None:
            return AddressCheck(valid=False, error="Address not found")
        return self.validate_zip_code(extracted)

    def validate_zip_code(self, zip_code: str) -> AddressCheck:
        cleaned = re.sub(r"\D", "", zip_code or "")
        if len(cleaned) != 5:
            return AddressCheck(valid=False, error="Invalid postal code format")

        location = self.coordinates.get(cleaned)
        if location is None:
            return AddressCheck(valid=False, error="Postal code not found")

        settings = get_settings()
        distance = haversine_km(settings.restaurant_latitude, settings.restaurant_longitude, *location)
        radius = settings.delivery_radius_km
        if distance > radius:
            logger.info("Address outside delivery radius", zip_code=cleaned, distance_km=round(distance, 1))
            return AddressCheck(
                valid=False,
                error=f"Delivery is not available beyond {radius:g} km",
                distance_km=round(distance, 1),
            )
        return AddressCheck(valid=True, distance_km=round(distance, 1))
