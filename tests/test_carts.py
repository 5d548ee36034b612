from uuid import uuid4

from tests.conftest import create_product


def test_cart_lifecycle(client, alice, bob):
    product = create_product(client, alice, unit_price=2.5)

    res = client.post("/api/v1/carts", json={"product_id": product["id"], "amount": 4}, headers=alice.headers)
    assert res.status_code == 201
    item = res.json()["data"]
    assert item["sub_total"] == 10

    res = client.post("/api/v1/carts", json={"product_id": product["id"], "amount": 1}, headers=alice.headers)
    assert res.status_code == 409

    res = client.put(f"/api/v1/carts/{item['id']}", json={"amount": 10}, headers=alice.headers)
    assert res.json()["data"]["sub_total"] == 25

    assert client.get(f"/api/v1/carts/{item['id']}", headers=bob.headers).status_code == 403
    assert client.get("/api/v1/carts", headers=bob.headers).json()["total"] == 0
    assert client.get("/api/v1/carts", headers=alice.headers).json()["total"] == 1

    assert client.delete(f"/api/v1/carts/{item['id']}", headers=alice.headers).status_code == 200
    res = client.get(f"/api/v1/carts/{item['id']}", headers=alice.headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Cart item not found"


def test_cart_rejects_bad_amount_and_unknown_product(client, alice):
    product = create_product(client, alice)
    res = client.post("/api/v1/carts", json={"product_id": product["id"], "amount": 0}, headers=alice.headers)
    assert res.status_code == 400
    res = client.post("/api/v1/carts", json={"product_id": str(uuid4()), "amount": 1}, headers=alice.headers)
    assert res.status_code == 404


def test_placing_an_order_clears_the_cart_lines(client, alice):
    product = create_product(client, alice)
    client.post("/api/v1/carts", json={"product_id": product["id"], "amount": 1}, headers=alice.headers)

    res = client.post("/api/v1/orders", json={
        "items": [{"product_id": product["id"]}], "shipping_fee": 0, "shipping_method": "EMS",
    }, headers=alice.headers)
    assert res.status_code == 201
    assert client.get("/api/v1/carts", headers=alice.headers).json()["total"] == 0
