from app.core.security import card_fingerprint, pwd_context
from app.models.payment_method import PaymentMethod


def _card(user_id: str, **overrides) -> dict:
    body = {
        "card_holder": "Ana López",
        "card_number": "4111 1111 1111 1234",
        "expiration_date": "12/27",
        "cvv": "123",
        "userId": user_id,
    }
    body.update(overrides)
    return body


def test_card_is_masked_and_cvv_never_returned(client, factory):
    user = factory.user(name="Ana López")

    r = client.post("/payment-methods/", json=_card(user["id"]))

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["card_number"] == "**** **** **** 1234"
    assert body["userId"] == user["id"]
    assert body["user"]["name"] == "Ana López"
    assert "cvv" not in body
    assert "cvv_hash" not in body
    assert "card_fingerprint" not in body


def test_card_data_is_stored_protected(client, app, factory, settings):
    user = factory.user()
    created = client.post("/payment-methods/", json=_card(user["id"])).json()

    with app.state.session_factory() as db:
        stored = db.query(PaymentMethod).filter(PaymentMethod.id == created["id"]).first()
        assert stored.card_last4 == "1234"
        assert stored.card_fingerprint == card_fingerprint("4111111111111234", settings.CARD_HASH_SECRET)
        assert "4111111111111234" not in stored.card_fingerprint
        assert stored.cvv_hash != "123"
        assert pwd_context.verify("123", stored.cvv_hash)


def test_invalid_card_data_is_rejected(client, factory):
    user = factory.user()

    assert client.post("/payment-methods/", json=_card(user["id"], card_number="1234")).status_code == 400
    assert client.post("/payment-methods/", json=_card(user["id"], cvv="12")).status_code == 400
    assert client.post("/payment-methods/", json=_card(user["id"], expiration_date="13/27")).status_code == 400


def test_payment_method_requires_existing_user(client):
    r = client.post("/payment-methods/", json=_card("no-existe"))

    assert r.status_code == 400
    assert r.json() == {"error": "Usuario no encontrado"}


def test_list_by_user(client, factory):
    user = factory.user()
    other = factory.user()
    client.post("/payment-methods/", json=_card(user["id"]))
    client.post("/payment-methods/", json=_card(user["id"], card_number="5555-5555-5555-4444"))

    r = client.get(f"/payment-methods/user/{user['id']}")
    assert r.status_code == 200
    assert sorted(pm["card_number"][-4:] for pm in r.json()) == ["1234", "4444"]

    assert len(client.get("/payment-methods/").json()) == 2
    assert client.get(f"/payment-methods/user/{other['id']}").status_code == 404


def test_update_and_delete_payment_method(client, factory):
    user = factory.user()
    created = client.post("/payment-methods/", json=_card(user["id"])).json()

    update = {
        "card_holder": "Ana L.",
        "card_number": "5555555555554444",
        "expiration_date": "01/29",
        "cvv": "9876",
    }
    r = client.put(f"/payment-methods/{created['id']}", json=update)
    assert r.status_code == 200
    assert r.json()["card_number"] == "**** **** **** 4444"
    assert r.json()["expiration_date"] == "01/29"

    assert client.delete(f"/payment-methods/{created['id']}").status_code == 200
    assert client.delete(f"/payment-methods/{created['id']}").status_code == 404
