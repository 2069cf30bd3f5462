from decimal import Decimal

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def takeaway_bed():
    from takeaway.domain import takeaway

    bed = DomainFixture(takeaway)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(takeaway_bed):
    with takeaway_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def restaurant_settings():
    """Known restaurant settings for every test: 10% VAT, 5.00 delivery, 10 km radius."""
    from takeaway.settings import RestaurantSettings, reset_settings, set_settings

    settings = RestaurantSettings(
        vat_rate=Decimal("0.10"),
        delivery_fee=Decimal("5.00"),
        delivery_radius_km=10.0,
        order_number_prefix="ORD-",
    )
    set_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture(autouse=True)
def address_validator():
    """Accept every delivery address unless a test configures otherwise."""
    from takeaway.geo import reset_address_validator, set_address_validator
    from takeaway.geo.fake_adapter import FakeAddressValidator

    validator = FakeAddressValidator()
    set_address_validator(validator)
    yield validator
    reset_address_validator()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_dish():
    from takeaway.menu.management import AddDish

    def _add(name="Dish", price="10.00", category="Plats", image=None):
        return current_domain.process(
            AddDish(name=name, price=price, category=category, image=image),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def create_coupon():
    from takeaway.coupon.management import CreateCoupon

    def _create(code="WELCOME", discount_type="fixed", discount_value="5.00", **extra):
        return current_domain.process(
            CreateCoupon(code=code, discount_type=discount_type, discount_value=discount_value, **extra),
            asynchronous=False,
        )

    return _create


@pytest.fixture()
def session_id():
    return "sess-test-001"


@pytest.fixture()
def filled_cart(add_dish, session_id):
    """Session cart holding 2 x 10.00 + 1 x 15.00 (35.00 tax-inclusive)."""
    from takeaway.cart.items import AddToCart

    burger = add_dish(name="Burger maison", price="10.00")
    salad = add_dish(name="Salade niçoise", price="15.00", category="Entrées")
    current_domain.process(AddToCart(session_id=session_id, product_id=burger, quantity=2), asynchronous=False)
    current_domain.process(AddToCart(session_id=session_id, product_id=salad, quantity=1), asynchronous=False)
    return {"session_id": session_id, "burger": burger, "salad": salad}
