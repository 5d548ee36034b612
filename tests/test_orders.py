from uuid import UUID, uuid4

import pytest

from printshop.adapters.db.sqlalchemy import models
from printshop.adapters.db.sqlalchemy.file_repository import SQLAlchemyFileRepository
from printshop.application.dto import OrderInput
from printshop.domain.errors import InternalError
from printshop.domain.user import Actor, Role

from tests.conftest import create_product


def place(client, user, product_ids, shipping_fee=50):
    return client.post("/api/v1/orders", json={
        "items": [{"product_id": product_id} for product_id in product_ids],
        "shipping_fee": shipping_fee,
        "shipping_method": "EMS",
    }, headers=user.headers)


def count_orders(container) -> int:
    with container.session_factory() as session:
        return session.query(models.Order).count()


def test_order_subtotal_is_computed_on_the_server(client, alice):
    first = create_product(client, alice, unit_price=10.0, amount=5)
    second = create_product(client, alice, unit_price=20.0, amount=4)

    res = place(client, alice, [first["id"], second["id"]])
    assert res.status_code == 201, res.text
    order = res.json()["data"]
    assert order["order_sub_total"] == 130
    assert order["total"] == 180
    assert order["status"] == "PENDING"
    assert len(order["lines"]) == 2
    assert {line["product_id"]: line["sub_total"] for line in order["lines"]} == {
        first["id"]: 50, second["id"]: 80,
    }

    res = client.get(f"/api/v1/products/{first['id']}", headers=alice.headers)
    assert res.json()["data"]["is_purchased"] is True


def test_client_totals_are_ignored(client, alice):
    product = create_product(client, alice, unit_price=10.0, amount=5)
    res = client.post("/api/v1/orders", json={
        "items": [{"product_id": product["id"], "unit_price": 0.01, "sub_total": 0.01}],
        "order_sub_total": 0.01,
        "shipping_fee": 0,
        "shipping_method": "EMS",
    }, headers=alice.headers)
    assert res.json()["data"]["order_sub_total"] == 50


def test_missing_product_aborts_the_whole_order(client, container, alice):
    product = create_product(client, alice)
    res = place(client, alice, [product["id"], str(uuid4())])
    assert res.status_code == 404
    assert count_orders(container) == 0

    res = client.get(f"/api/v1/products/{product['id']}", headers=alice.headers)
    assert res.json()["data"]["is_purchased"] is False


def test_failure_while_marking_purchased_rolls_back(client, container, alice, monkeypatch):
    product = create_product(client, alice)

    def broken(self, product_ids):
        raise RuntimeError("disk full")

    monkeypatch.setattr(SQLAlchemyFileRepository, "mark_purchased", broken)
    actor = Actor(id=UUID(alice.id), role=Role.USER)
    order_input = OrderInput.model_validate({
        "items": [{"product_id": product["id"]}], "shipping_fee": 0, "shipping_method": "EMS",
    })
    with pytest.raises(InternalError, match="Failed to create order"):
        container.order_service().create_order(actor, order_input)

    assert count_orders(container) == 0
    res = client.get(f"/api/v1/products/{product['id']}", headers=alice.headers)
    assert res.json()["data"]["is_purchased"] is False


def test_ordering_someone_elses_or_purchased_product(client, alice, bob):
    product = create_product(client, alice)
    assert place(client, bob, [product["id"]]).status_code == 403

    assert place(client, alice, [product["id"]]).status_code == 201
    res = place(client, alice, [product["id"]])
    assert res.status_code == 409


def test_duplicate_products_in_one_order(client, alice):
    product = create_product(client, alice)
    assert place(client, alice, [product["id"], product["id"]]).status_code == 400


def test_order_access_and_status(client, admin, alice, bob):
    product = create_product(client, alice)
    order = place(client, alice, [product["id"]]).json()["data"]

    assert client.get(f"/api/v1/orders/{order['id']}", headers=bob.headers).status_code == 403
    assert client.get(f"/api/v1/orders/{uuid4()}", headers=bob.headers).status_code == 404
    assert client.get("/api/v1/orders", headers=bob.headers).json()["total"] == 0
    assert client.get("/api/v1/orders", headers=admin.headers).json()["total"] == 1
    assert client.get(f"/api/v1/orders/user/{alice.id}", headers=alice.headers).json()["total"] == 1
    assert client.get(f"/api/v1/orders/user/{alice.id}", headers=bob.headers).status_code == 403

    res = client.put(f"/api/v1/orders/{order['id']}", json={"status": "SHIPPED"}, headers=admin.headers)
    assert res.json()["data"]["status"] == "SHIPPED"
    res = client.put(f"/api/v1/orders/{order['id']}", json={"status": "LOST"}, headers=admin.headers)
    assert res.status_code == 400

    assert client.delete(f"/api/v1/orders/{order['id']}", headers=alice.headers).status_code == 200
    assert client.get(f"/api/v1/orders/{order['id']}", headers=alice.headers).status_code == 404
