from uuid import uuid4

from tests.conftest import create_product


def test_pagination_over_categories(client, admin, alice):
    for i in range(15):
        res = client.post("/api/v1/categories", json={"name": f"category {i}"}, headers=admin.headers)
        assert res.status_code == 201

    res = client.get("/api/v1/categories?page=2&limit=10", headers=alice.headers)
    body = res.json()
    assert res.status_code == 200
    assert len(body["data"]) == 5
    assert body["total"] == 15
    assert body["page"] == 2
    assert body["total_pages"] == 2


def test_invalid_page_is_bad_request(client, alice):
    res = client.get("/api/v1/products?page=0", headers=alice.headers)
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid page or limit value"}

    res = client.get("/api/v1/products?limit=abc", headers=alice.headers)
    assert res.status_code == 400


def test_categories_are_admin_managed(client, admin, alice):
    res = client.post("/api/v1/categories", json={"name": "boxes"}, headers=alice.headers)
    assert res.status_code == 403

    category = client.post("/api/v1/categories", json={"name": "boxes"}, headers=admin.headers).json()["data"]
    assert client.get(f"/api/v1/categories/{category['id']}", headers=alice.headers).status_code == 200
    res = client.put(f"/api/v1/categories/{category['id']}", json={"name": "bags"}, headers=alice.headers)
    assert res.status_code == 403
    res = client.put(f"/api/v1/categories/{category['id']}", json={"name": "bags"}, headers=admin.headers)
    assert res.json()["data"]["name"] == "bags"

    res = client.delete(f"/api/v1/categories/{uuid4()}", headers=alice.headers)
    assert res.status_code == 404
    assert client.delete(f"/api/v1/categories/{category['id']}", headers=admin.headers).status_code == 200


def test_product_sub_total_follows_updates(client, alice):
    product = create_product(client, alice, unit_price=2.0, amount=100)
    assert product["sub_total"] == 200
    assert product["user_id"] == alice.id

    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": 150}, headers=alice.headers)
    assert res.status_code == 200
    assert res.json()["data"]["sub_total"] == 300
    assert res.json()["data"]["unit_price"] == 2.0


def test_product_update_by_stranger_is_forbidden(client, alice, bob):
    product = create_product(client, alice)
    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": 1}, headers=bob.headers)
    assert res.status_code == 403
    assert res.json()["message"] == "You are not authorized to access this product"

    res = client.put(f"/api/v1/products/{uuid4()}", json={"amount": 1}, headers=bob.headers)
    assert res.status_code == 404


def test_only_admin_flags_products_purchased(client, admin, alice):
    product = create_product(client, alice)
    res = client.put(f"/api/v1/products/{product['id']}", json={"is_purchased": True}, headers=alice.headers)
    assert res.status_code == 403

    res = client.put(f"/api/v1/products/{product['id']}", json={"is_purchased": True}, headers=admin.headers)
    assert res.status_code == 200

    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": 5}, headers=alice.headers)
    assert res.status_code == 409
    assert res.json()["message"] == "Product is already purchased, cannot update"
    res = client.delete(f"/api/v1/products/{product['id']}", headers=alice.headers)
    assert res.status_code == 409


def test_product_listing_is_row_filtered(client, admin, alice, bob):
    create_product(client, alice)
    create_product(client, alice)
    create_product(client, bob)

    assert client.get("/api/v1/products", headers=alice.headers).json()["total"] == 2
    assert client.get("/api/v1/products", headers=bob.headers).json()["total"] == 1
    assert client.get("/api/v1/products", headers=admin.headers).json()["total"] == 3

    assert client.get(f"/api/v1/products/user/{alice.id}", headers=alice.headers).json()["total"] == 2
    assert client.get(f"/api/v1/products/user/{alice.id}", headers=bob.headers).status_code == 403
    assert client.get(f"/api/v1/products/user/{uuid4()}", headers=bob.headers).status_code == 404


def test_products_by_category(client, admin, alice, bob):
    category = client.post("/api/v1/categories", json={"name": "boxes"}, headers=admin.headers).json()["data"]
    create_product(client, alice, category_id=category["id"])
    create_product(client, alice)
    create_product(client, bob, category_id=category["id"])

    res = client.get(f"/api/v1/products/category/{category['id']}", headers=alice.headers)
    assert res.json()["total"] == 1
    res = client.get(f"/api/v1/products/category/{category['id']}", headers=admin.headers)
    assert res.json()["total"] == 2
    res = client.get(f"/api/v1/products/category/{uuid4()}", headers=alice.headers)
    assert res.status_code == 404


def test_product_with_unknown_category_is_not_found(client, alice):
    res = client.post("/api/v1/products", json={
        "category_id": str(uuid4()),
        "size": "A4", "material": "paper", "shape": "bag", "printing_side": "both",
        "parcel_color": ["white"], "ink_color": ["red"], "unit_price": 1.0, "amount": 1,
    }, headers=alice.headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Category not found"


def test_delete_product(client, alice, bob):
    product = create_product(client, alice)
    assert client.delete(f"/api/v1/products/{product['id']}", headers=bob.headers).status_code == 403
    assert client.delete(f"/api/v1/products/{product['id']}", headers=alice.headers).status_code == 200
    assert client.get(f"/api/v1/products/{product['id']}", headers=alice.headers).status_code == 404


def test_owner_stranger_admin_scenario(client, admin, alice, bob):
    product = create_product(client, alice, unit_price=100.0, amount=2)
    assert product["sub_total"] == 200

    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": 5}, headers=bob.headers)
    assert res.status_code == 403

    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": 3}, headers=admin.headers)
    assert res.json()["data"]["sub_total"] == 300

    res = client.post("/api/v1/orders", json={
        "items": [{"product_id": product["id"]}], "shipping_fee": 0, "shipping_method": "EMS",
    }, headers=alice.headers)
    assert res.status_code == 201
    res = client.delete(f"/api/v1/products/{product['id']}", headers=alice.headers)
    assert res.status_code == 409


def test_missing_product_is_not_found_even_with_admin_only_fields(client, alice):
    res = client.put(f"/api/v1/products/{uuid4()}", json={"is_purchased": True}, headers=alice.headers)
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Product not found"}


def test_optional_product_fields_can_be_cleared(client, admin, alice):
    category = client.post("/api/v1/categories", json={"name": "boxes"}, headers=admin.headers).json()["data"]
    product = create_product(client, alice, category_id=category["id"], note="matte finish")

    res = client.put(f"/api/v1/products/{product['id']}", json={"note": None, "category_id": None},
                     headers=alice.headers)
    assert res.status_code == 200
    assert res.json()["data"]["note"] is None
    assert res.json()["data"]["category_id"] is None
    assert res.json()["data"]["sub_total"] == product["sub_total"]

    res = client.get(f"/api/v1/products/{product['id']}", headers=alice.headers)
    assert res.json()["data"]["note"] is None

    res = client.put(f"/api/v1/products/{product['id']}", json={"amount": None}, headers=alice.headers)
    assert res.status_code == 400
