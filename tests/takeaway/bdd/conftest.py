"""Shared BDD fixtures and step definitions for the Takeaway domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from takeaway.cart.items import AddToCart, ClearCart, get_cart


@pytest.fixture()
def menu():
    """Dish ids by name, filled by the menu Given steps."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the menu offers "{name}" at {price}'))
def _(add_dish, menu, name, price):
    menu[name] = add_dish(name=name, price=price)


@given(parsers.cfparse('the cart holds {quantity:d} "{name}"'))
def _(menu, session_id, quantity, name):
    current_domain.process(
        AddToCart(session_id=session_id, product_id=menu[name], quantity=quantity),
        asynchronous=False,
    )


@given("the cart has been emptied")
def _(session_id):
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the cart is empty")
def _(session_id):
    assert get_cart(session_id)["items"] == []


@then(parsers.cfparse("the cart still holds {count:d} items"))
def _(session_id, count):
    assert get_cart(session_id)["item_count"] == count


@then(parsers.cfparse('the cart total is "{total}"'))
def _(session_id, total):
    assert get_cart(session_id)["total"] == total


