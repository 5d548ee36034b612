from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from printshop.application.http.fastapi.api import create_app
from printshop.application.ports import PaymentGateway, PaymentReceipt, PaymentRequest
from printshop.bootstrap import build_container
from printshop.config import Settings

ADMIN_EMAIL = "admin@printshop.io"
PASSWORD = "secret123"

PRODUCT = {
    "size": "20x20x10 cm",
    "material": "kraft",
    "shape": "box",
    "printing_side": "outside",
    "parcel_color": ["brown"],
    "ink_color": ["black"],
    "unit_price": 2.0,
    "amount": 100,
}


class FakePaymentGateway(PaymentGateway):
    def __init__(self):
        self.requests: list[PaymentRequest] = []
        self.error: Exception | None = None

    def create_payment(self, request: PaymentRequest) -> PaymentReceipt:
        if self.error is not None:
            raise self.error
        self.requests.append(request)
        return PaymentReceipt(
            **request.model_dump(),
            redirect_url=f"https://pay.example.org/checkout/{request.ref_no}",
            status="Y",
            status_name="Waiting for payment",
        )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        admin_emails=[ADMIN_EMAIL],
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
    )


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def container(settings, gateway):
    return build_container(settings, gateway=gateway)


@pytest.fixture
def client(container):
    with TestClient(create_app(container=container)) as c:
        yield c


def signup(client: TestClient, email: str) -> SimpleNamespace:
    res = client.post("/api/v1/auth/register", json={
        "first_name": "Test",
        "last_name": email.split("@")[0],
        "email": email,
        "password": PASSWORD,
        "phone": "0812345678",
    })
    assert res.status_code == 201, res.text
    user_id = res.json()["data"]["id"]
    res = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert res.status_code == 200, res.text
    # ログイン時のクッキーは残さない (各テストはヘッダーで認証する)
    client.cookies.clear()
    token = res.json()["data"]["token"]
    return SimpleNamespace(id=user_id, email=email, headers={"Authorization": f"Bearer {token}"})


@pytest.fixture
def admin(client):
    return signup(client, ADMIN_EMAIL)


@pytest.fixture
def alice(client):
    return signup(client, "alice@printshop.io")


@pytest.fixture
def bob(client):
    return signup(client, "bob@printshop.io")


def create_product(client: TestClient, user: SimpleNamespace, **overrides) -> dict:
    res = client.post("/api/v1/products", json={**PRODUCT, **overrides}, headers=user.headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]
