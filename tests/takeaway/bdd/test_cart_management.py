"""BDD tests for the session cart."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from takeaway.cart.items import AddToCart, UpdateCartQuantity, get_cart

scenarios("features/cart_management.feature")


@when(parsers.cfparse('the customer adds {quantity:d} "{name}"'))
def _(menu, session_id, quantity, name):
    current_domain.process(
        AddToCart(session_id=session_id, product_id=menu[name], quantity=quantity),
        asynchronous=False,
    )


@when(parsers.cfparse('the customer sets the quantity of "{name}" to {quantity:d}'))
def _(menu, session_id, name, quantity):
    current_domain.process(
        UpdateCartQuantity(session_id=session_id, product_id=menu[name], quantity=quantity),
        asynchronous=False,
    )


@then(parsers.cfparse("the cart has {count:d} line"))
def _(session_id, count):
    assert len(get_cart(session_id)["items"]) == count


@then(parsers.cfparse('the cart of session "{other_session}" is empty'))
def _(other_session):
    assert get_cart(other_session)["item_count"] == 0
