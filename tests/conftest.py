import os
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENV", "test")

from app.config import Settings  # noqa: E402
from app.core.exceptions import EmailDeliveryError, PaymentGatewayError, StorageError  # noqa: E402
from app.main import create_app  # noqa: E402


class FakeGateway:
    """
    Stand-in for MercadoPagoService: records preferences and serves
    payments from an in-memory dict keyed by gateway payment id.
    """

    def __init__(self):
        self.preferences: List[dict] = []
        self.payments: Dict[str, dict] = {}
        self.fail = False

    def create_preference(self, price: float, reservation_id: Optional[str] = None) -> dict:
        if self.fail:
            raise PaymentGatewayError("Mercado Pago: invalid token", payload={"message": "invalid token"})
        self.preferences.append({"price": price, "reservation_id": reservation_id})
        return {
            "id": f"pref-{len(self.preferences)}",
            "init_point": "https://www.mercadopago.com.mx/checkout/v1/redirect?pref_id=test",
            "external_reference": reservation_id,
        }

    def get_payment(self, payment_id: str) -> dict:
        if self.fail or str(payment_id) not in self.payments:
            raise PaymentGatewayError(f"Mercado Pago: pago {payment_id} no encontrado")
        return self.payments[str(payment_id)]


class FakeMailer:
    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False

    def send(self, to_email: str, subject: str, message: str, html_content: Optional[str] = None) -> str:
        if self.fail:
            raise EmailDeliveryError("Resend no disponible")
        self.sent.append({"to": to_email, "subject": subject, "text": message, "html": html_content})
        return f"email-{len(self.sent)}"


class FakeStorage:
    def __init__(self):
        self.uploaded: List[str] = []
        self.fail = False

    async def upload_image(self, file, folder: str = "maquinaria") -> str:
        await file.read()
        if self.fail:
            raise StorageError("bucket no disponible")
        url = f"https://storage.test/{folder}/{file.filename}"
        self.uploaded.append(url)
        return url


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENV="test",
        LOG_LEVEL="WARNING",
        DATABASE_URL="sqlite://",
        CARD_HASH_SECRET="test-card-secret",
        APP_DEEP_LINK="rentek://payment",
    )


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def app(settings, gateway, mailer, storage):
    """
    Fresh application per test: own in-memory database and fake
    upstream services in app.state.
    """
    application = create_app(settings)
    application.state.payment_gateway = gateway
    application.state.mailer = mailer
    application.state.storage = storage
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


class _Factory:
    """
    Helper to create records through the public API.
    """

    def __init__(self, client: TestClient):
        self.client = client
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def user(self, **overrides) -> dict:
        n = self._next()
        body = {
            "name": f"Cliente {n}",
            "email": f"cliente{n}@example.com",
            "password": "secreto123",
            "phoneNumber": f"55500000{n:02d}",
        }
        body.update(overrides)
        r = self.client.post("/users/", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    def provider(self, **overrides) -> dict:
        n = self._next()
        body = {
            "name": f"Proveedor {n}",
            "email": f"proveedor{n}@example.com",
            "password": "secreto123",
            "phoneNumber": f"55510000{n:02d}",
            "rating": 4.5,
        }
        body.update(overrides)
        r = self.client.post("/providers/", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    def machinery(self, provider_id: str, **overrides) -> dict:
        n = self._next()
        body = {
            "name": f"Excavadora {n}",
            "location": "Monterrey",
            "description": "Excavadora hidráulica de 20 toneladas",
            "rental_price": 1500.0,
            "provider_id": provider_id,
        }
        body.update(overrides)
        r = self.client.post("/machinery/", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    def reservation_body(self, user_id: str, machinery_id: str, **overrides) -> dict:
        body = {
            "rental_start": "2025-03-01T08:00:00",
            "rental_end": "2025-03-04T08:00:00",
            "address_entrega": "Av. Constitución 100, Monterrey",
            "price": 4500.0,
            "payment_status": "pendiente",
            "delivery_status": "pendiente",
            "userId": user_id,
            "machineryId": machinery_id,
        }
        body.update(overrides)
        return body

    def reservation(self, **overrides) -> dict:
        user = self.user()
        provider = self.provider()
        machinery = self.machinery(provider["id"])
        body = self.reservation_body(user["id"], machinery["id"], **overrides)
        r = self.client.post("/reservations/", json=body)
        assert r.status_code == 201, r.text
        return r.json()


@pytest.fixture()
def factory(client) -> _Factory:
    return _Factory(client)
