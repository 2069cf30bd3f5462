"""Application tests for operator revisions of placed orders."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from takeaway.coupon.coupon import Coupon
from takeaway.exceptions import OrderItemNotFound, OrderNotFound
from takeaway.order.order import Order
from takeaway.order.placement import PlaceOrder
from takeaway.order.revision import (
    AddOrderItem,
    RecalculateOrderTotals,
    RemoveOrderItem,
    ReviseOrderItem,
    UpdateOrderStatus,
)


@pytest.fixture()
def placed_order(filled_cart):
    def _place(**overrides):
        fields = {
            "session_id": filled_cart["session_id"],
            "fulfillment_mode": "delivery",
            "delivery_address": "10 La Canebière",
            "client_first_name": "Marie",
            "client_last_name": "Curie",
            "client_email": "marie@example.com",
        }
        fields.update(overrides)
        return current_domain.process(PlaceOrder(**fields), asynchronous=False)

    return _place


def _load(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _item_id(order, name):
    return next(str(item.id) for item in order.items if item.product_name == name)


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestAddOrderItem:
    def test_defaults_from_menu(self, placed_order, add_dish):
        order_id = placed_order()
        dish_id = add_dish(name="Tiramisu", price="6.00")

        item_id = _process(AddOrderItem(order_id=order_id, product_id=dish_id, quantity=2))

        order = _load(order_id)
        item = next(i for i in order.items if str(i.id) == item_id)
        assert item.product_name == "Tiramisu"
        assert item.line_total == "12.00"
        assert order.total == "52.00"
        assert order.subtotal == "42.73"
        assert order.tax_amount == "4.27"

    def test_explicit_name_and_price(self, placed_order):
        order_id = placed_order()

        _process(
            AddOrderItem(order_id=order_id, product_id="off-menu", product_name="Plat du jour", unit_price="9.00")
        )

        assert _load(order_id).total == "49.00"

    def test_unknown_order(self, add_dish):
        dish_id = add_dish()
        with pytest.raises(OrderNotFound):
            _process(AddOrderItem(order_id="missing-order", product_id=dish_id))


class TestReviseOrderItem:
    def test_quantity_change_recomputes(self, placed_order):
        order_id = placed_order()
        order = _load(order_id)

        _process(ReviseOrderItem(order_id=order_id, item_id=_item_id(order, "Burger maison"), quantity=1))

        order = _load(order_id)
        assert order.total == "30.00"
        assert order.subtotal == "22.73"

    def test_coupon_discount_follows_revision(self, placed_order, create_coupon):
        coupon_id = create_coupon(code="TEN", discount_type="percentage", discount_value="10")
        order_id = placed_order(coupon_id=coupon_id)
        assert _load(order_id).discount_amount == "4.00"

        order = _load(order_id)
        _process(ReviseOrderItem(order_id=order_id, item_id=_item_id(order, "Burger maison"), quantity=4))

        order = _load(order_id)
        assert order.discount_amount == "6.00"
        assert order.total == "54.00"

    def test_exhausted_coupon_keeps_discounting_its_order(self, placed_order, create_coupon):
        coupon_id = create_coupon(code="SOLO", usage_limit=1)
        order_id = placed_order(coupon_id=coupon_id)
        assert current_domain.repository_for(Coupon).get(coupon_id).usage_count == 1

        order = _load(order_id)
        _process(ReviseOrderItem(order_id=order_id, item_id=_item_id(order, "Salade niçoise"), unit_price="20.00"))

        order = _load(order_id)
        assert order.discount_amount == "5.00"
        assert order.total == "40.00"

    def test_unknown_item(self, placed_order):
        order_id = placed_order()
        with pytest.raises(OrderItemNotFound):
            _process(ReviseOrderItem(order_id=order_id, item_id="missing-item", quantity=2))


class TestRemoveOrderItem:
    def test_remove_recomputes(self, placed_order):
        order_id = placed_order()
        order = _load(order_id)

        _process(RemoveOrderItem(order_id=order_id, item_id=_item_id(order, "Salade niçoise")))

        order = _load(order_id)
        assert len(order.items) == 1
        assert order.total == "25.00"

    def test_last_item_stays(self, placed_order):
        order_id = placed_order()
        order = _load(order_id)
        _process(RemoveOrderItem(order_id=order_id, item_id=_item_id(order, "Salade niçoise")))

        with pytest.raises(ValidationError):
            _process(RemoveOrderItem(order_id=order_id, item_id=_item_id(order, "Burger maison")))
        assert len(_load(order_id).items) == 1


class TestRecalculateOrderTotals:
    def test_corrects_drifted_totals(self, placed_order):
        order_id = placed_order()
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        order.total = "99.99"
        order.subtotal = "1.00"
        repo.add(order)

        count = _process(RecalculateOrderTotals(order_id=order_id))

        order = _load(order_id)
        assert count == 1
        assert order.total == "40.00"
        assert order.subtotal == "31.82"

    def test_recalculating_twice_changes_nothing(self, placed_order):
        order_id = placed_order()
        _process(RecalculateOrderTotals(order_id=order_id))
        first = _load(order_id).to_dict()

        _process(RecalculateOrderTotals(order_id=order_id))
        second = _load(order_id).to_dict()

        for field in ("subtotal", "tax_amount", "discount_amount", "total"):
            assert first[field] == second[field]

    def test_all_orders(self, placed_order, add_dish):
        from takeaway.cart.items import AddToCart

        placed_order()
        dish_id = add_dish(price="8.00")
        _process(AddToCart(session_id="sess-second", product_id=dish_id))
        placed_order(session_id="sess-second")

        assert _process(RecalculateOrderTotals()) == 2


class TestUpdateOrderStatus:
    def test_transition(self, placed_order):
        order_id = placed_order()
        _process(UpdateOrderStatus(order_id=order_id, status="confirmed"))
        assert _load(order_id).status == "confirmed"

    def test_invalid_transition(self, placed_order):
        order_id = placed_order()
        with pytest.raises(ValidationError):
            _process(UpdateOrderStatus(order_id=order_id, status="delivered"))
        assert _load(order_id).status == "pending"
