"""Tests for the delivery-zone address validator."""

import pytest
from takeaway.geo.zone_adapter import ZoneAddressValidator, extract_zip_code, haversine_km


@pytest.fixture()
def validator():
    return ZoneAddressValidator()


def test_haversine_zero_distance():
    assert haversine_km(43.2965, 5.3698, 43.2965, 5.3698) == pytest.approx(0.0)


def test_haversine_marseille_to_paris():
    assert haversine_km(43.2965, 5.3698, 48.8625, 2.3363) == pytest.approx(660, abs=15)


@pytest.mark.parametrize(
    "address,expected",
    [
        ("10 La Canebière, 13001 Marseille", "13001"),
        ("Cours Mirabeau 13100 Aix", "13100"),
        ("12 rue sans code", None),
        (None, None),
    ],
)
def test_extract_zip_code(address, expected):
    assert extract_zip_code(address) == expected


class TestZoneValidator:
    @pytest.mark.parametrize("zip_code", ["13001", "13006", "13008"])
    def test_nearby_postal_codes_accepted(self, validator, zip_code):
        check = validator.validate("Marseille", zip_code)

        assert check.valid
        assert check.error is None
        assert check.distance_km < 10

    @pytest.mark.parametrize("zip_code", ["13100", "13400", "75001"])
    def test_distant_postal_codes_rejected(self, validator, zip_code):
        check = validator.validate("Somewhere", zip_code)

        assert not check.valid
        assert check.error == "Delivery is not available beyond 10 km"
        assert check.distance_km > 10

    def test_unknown_postal_code(self, validator):
        check = validator.validate("Nowhere", "99999")
        assert not check.valid
        assert check.error == "Postal code not found"

    @pytest.mark.parametrize("zip_code", ["1300", "130011", "abcde"])
    def test_malformed_postal_code(self, validator, zip_code):
        check = validator.validate("Marseille", zip_code)
        assert not check.valid
        assert check.error == "Invalid postal code format"

    def test_postal_code_read_from_address(self, validator):
        assert validator.validate("10 La Canebière, 13001 Marseille").valid

    def test_address_without_postal_code(self, validator):
        check = validator.validate("10 La Canebière")
        assert not check.valid
        assert check.error == "Address not found"

    def test_radius_follows_settings(self, validator, restaurant_settings):
        from dataclasses import replace

        from takeaway.settings import set_settings

        set_settings(replace(restaurant_settings, delivery_radius_km=50.0))
        assert validator.validate("Aix", "13100").valid
