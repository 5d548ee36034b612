from uuid import uuid4

import pytest

from printshop.application.dto import Page, PageRequest
from printshop.domain.catalog import Product
from printshop.domain.errors import BadRequestError
from printshop.domain.order import CartItem, Order, OrderStatus

from tests.conftest import PRODUCT


def make_product(**overrides) -> Product:
    return Product.create(user_id=uuid4(), **{**PRODUCT, **overrides})


def test_product_sub_total_is_computed():
    assert make_product(unit_price=2.0, amount=100).sub_total == 200


def test_product_update_recomputes_from_merged_values():
    product = make_product(unit_price=2.0, amount=100)
    assert product.with_changes({"amount": 150}).sub_total == 300
    assert product.with_changes({"unit_price": 1.5}).sub_total == 150
    assert product.with_changes({"note": "rush"}).sub_total == 200


def test_order_snapshots_product_prices():
    first = make_product(unit_price=10.0, amount=5)
    second = make_product(unit_price=20.0, amount=4)
    order = Order.place(uuid4(), [first, second], shipping_fee=50, shipping_method="EMS")

    assert order.order_sub_total == 130
    assert order.total == 180
    assert order.status is OrderStatus.PENDING
    assert [(line.product_id, line.sub_total) for line in order.lines] == [(first.id, 50), (second.id, 80)]
    assert all(line.order_id == order.id for line in order.lines)

    # 後から商品価格が変わっても注文明細は変わらない
    first.with_changes({"unit_price": 99.0})
    assert order.lines[0].unit_price == 10.0


def test_await_payment():
    order = Order.place(uuid4(), [make_product()], shipping_fee=0, shipping_method="pickup")
    payment_id = uuid4()
    updated = order.await_payment(payment_id)
    assert updated.payment_id == payment_id
    assert updated.status is OrderStatus.AWAITING_PAYMENT
    assert order.status is OrderStatus.PENDING


def test_cart_item_uses_product_price():
    product = make_product(unit_price=3.5)
    item = CartItem.for_product(uuid4(), product, 4)
    assert item.sub_total == 14
    assert item.change_amount(6, product.unit_price).sub_total == 21


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, 5)])
def test_page_request_rejects_non_positive_values(page, limit):
    with pytest.raises(BadRequestError, match="Invalid page or limit value"):
        PageRequest.of(page, limit)


def test_page_total_pages():
    request = PageRequest.of(2, 10)
    assert request.skip == 10
    page = Page.build(list(range(5)), 15, request)
    assert page.total_pages == 2
    assert Page.build([], 0, request).total_pages == 0
