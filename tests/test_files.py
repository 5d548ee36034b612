import json
import os
from datetime import timedelta
from uuid import uuid4
from urllib.parse import urlsplit

from printshop.adapters.db.sqlalchemy.file_repository import SQLAlchemyFileRepository
from printshop.domain.errors import StorageError
from printshop.domain.user import utcnow

from tests.conftest import PRODUCT, create_product

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(client, user, product_id, name="artwork.png", data=PNG):
    return client.post(
        f"/api/v1/files/product/{product_id}",
        files={"file": (name, data, "image/png")},
        headers=user.headers,
    )


def stored_path(settings, key):
    return os.path.join(settings.upload_dir, key)


def test_upload_and_read_through_signed_url(client, settings, alice):
    product = create_product(client, alice)
    res = upload(client, alice, product["id"])
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    assert data["file"]["display_name"] == "artwork.png"
    assert data["file"]["size"] == len(PNG)
    assert os.path.exists(stored_path(settings, data["file"]["key"]))

    url = urlsplit(data["url"])
    res = client.get(f"{url.path}?{url.query}")
    assert res.status_code == 200
    assert res.content == PNG

    res = client.get(f"{url.path}?token=forged")
    assert res.status_code == 401


def test_upload_to_someone_elses_product(client, alice, bob):
    product = create_product(client, alice)
    assert upload(client, bob, product["id"]).status_code == 403


def test_list_files_for_product(client, alice, bob):
    product = create_product(client, alice)
    res = client.get(f"/api/v1/files/product/{product['id']}", headers=alice.headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Files not found"

    upload(client, alice, product["id"], name="front.png")
    upload(client, alice, product["id"], name="back.png")
    res = client.get(f"/api/v1/files/product/{product['id']}", headers=alice.headers)
    assert [item["file"]["display_name"] for item in res.json()["data"]] == ["front.png", "back.png"]
    assert all("token=" in item["url"] for item in res.json()["data"])

    assert client.get(f"/api/v1/files/product/{product['id']}", headers=bob.headers).status_code == 403


def test_update_and_delete_file(client, settings, alice, bob):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]

    res = client.put(f"/api/v1/files/{file['id']}", json={"display_name": "logo.png"}, headers=alice.headers)
    assert res.json()["data"]["file"]["display_name"] == "logo.png"
    res = client.put(f"/api/v1/files/{file['id']}", json={"is_purchased": True}, headers=alice.headers)
    assert res.status_code == 403

    assert client.delete(f"/api/v1/files/{file['id']}", headers=bob.headers).status_code == 403
    assert client.delete(f"/api/v1/files/{file['id']}", headers=alice.headers).status_code == 200
    assert not os.path.exists(stored_path(settings, file["key"]))
    assert client.get(f"/api/v1/files/{file['id']}", headers=alice.headers).status_code == 404


def test_purchased_files_are_locked(client, alice):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]
    client.post("/api/v1/orders", json={
        "items": [{"product_id": product["id"]}], "shipping_fee": 0, "shipping_method": "EMS",
    }, headers=alice.headers)

    res = client.delete(f"/api/v1/files/{file['id']}", headers=alice.headers)
    assert res.status_code == 409
    assert res.json()["message"] == "File is already purchased, cannot delete"
    assert upload(client, alice, product["id"]).status_code == 409


def test_sweep_removes_only_expired_unpurchased_files(client, container, settings, alice):
    kept = create_product(client, alice)
    purchased_file = upload(client, alice, kept["id"]).json()["data"]["file"]
    client.post("/api/v1/orders", json={
        "items": [{"product_id": kept["id"]}], "shipping_fee": 0, "shipping_method": "EMS",
    }, headers=alice.headers)
    abandoned = create_product(client, alice)
    stale_file = upload(client, alice, abandoned["id"]).json()["data"]["file"]

    service = container.file_service()
    assert service.sweep_unpurchased_files(now=utcnow()).deleted == 0

    result = service.sweep_unpurchased_files(now=utcnow() + timedelta(days=15))
    assert (result.deleted, result.failed) == (1, 0)
    assert not os.path.exists(stored_path(settings, stale_file["key"]))
    assert os.path.exists(stored_path(settings, purchased_file["key"]))
    assert client.get(f"/api/v1/files/{stale_file['id']}", headers=alice.headers).status_code == 404


def test_sweep_continues_past_failures(client, container, alice, monkeypatch):
    product = create_product(client, alice)
    first = upload(client, alice, product["id"], name="a.png").json()["data"]["file"]
    upload(client, alice, product["id"], name="b.png")

    original_delete = container.storage.delete

    def flaky_delete(key):
        if key == first["key"]:
            raise StorageError("File deletion failed")
        original_delete(key)

    monkeypatch.setattr(container.storage, "delete", flaky_delete)
    result = container.file_service().sweep_unpurchased_files(now=utcnow() + timedelta(days=15))
    assert (result.deleted, result.failed) == (1, 1)
    assert client.get(f"/api/v1/files/{first['id']}", headers=alice.headers).status_code == 200


def test_product_with_file_is_created_together(client, settings, alice):
    res = client.post(
        "/api/v1/products/with-file",
        data={"product": json.dumps(PRODUCT)},
        files={"file": ("design.png", PNG, "image/png")},
        headers=alice.headers,
    )
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    assert data["product"]["sub_total"] == 200
    assert data["file"]["product_id"] == data["product"]["id"]
    assert os.path.exists(stored_path(settings, data["file"]["key"]))


def test_product_with_file_rolls_back_both_halves(client, settings, alice, monkeypatch):
    def broken(self, file):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(SQLAlchemyFileRepository, "add", broken)
    res = client.post(
        "/api/v1/products/with-file",
        data={"product": json.dumps(PRODUCT)},
        files={"file": ("design.png", PNG, "image/png")},
        headers=alice.headers,
    )
    assert res.status_code == 500
    assert res.json()["message"] == "Failed to insert product with file"
    assert client.get("/api/v1/products", headers=alice.headers).json()["total"] == 0
    assert os.listdir(settings.upload_dir) == []


def test_product_with_invalid_json_is_bad_request(client, alice):
    res = client.post(
        "/api/v1/products/with-file",
        data={"product": json.dumps({**PRODUCT, "amount": 0})},
        files={"file": ("design.png", PNG, "image/png")},
        headers=alice.headers,
    )
    assert res.status_code == 400


def test_missing_file_is_not_found_even_with_admin_only_fields(client, alice):
    res = client.put(f"/api/v1/files/{uuid4()}", json={"is_purchased": True}, headers=alice.headers)
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "File not found"}


def test_file_display_name_cannot_be_cleared(client, alice):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]
    res = client.put(f"/api/v1/files/{file['id']}", json={"display_name": None}, headers=alice.headers)
    assert res.status_code == 400


def test_delete_product_removes_stored_objects(client, settings, alice):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]
    assert client.delete(f"/api/v1/products/{product['id']}", headers=alice.headers).status_code == 200
    assert not os.path.exists(stored_path(settings, file["key"]))


def test_storage_failure_after_delete_keeps_row_deleted(client, container, settings, alice, monkeypatch):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]

    def broken_delete(key):
        raise StorageError("File deletion failed")

    monkeypatch.setattr(container.storage, "delete", broken_delete)
    assert client.delete(f"/api/v1/files/{file['id']}", headers=alice.headers).status_code == 200
    assert client.get(f"/api/v1/files/{file['id']}", headers=alice.headers).status_code == 404
    assert os.path.exists(stored_path(settings, file["key"]))


def test_failed_commit_keeps_stored_object(client, settings, alice, monkeypatch):
    product = create_product(client, alice)
    file = upload(client, alice, product["id"]).json()["data"]["file"]

    def broken(self, file_id):
        raise RuntimeError("delete failed")

    monkeypatch.setattr(SQLAlchemyFileRepository, "delete", broken)
    res = client.delete(f"/api/v1/files/{file['id']}", headers=alice.headers)
    assert res.status_code == 500
    assert res.json()["message"] == "Failed to delete file"
    assert os.path.exists(stored_path(settings, file["key"]))
