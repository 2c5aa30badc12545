from app.core.email_service import build_reservation_confirmation


def _email_body(**overrides) -> dict:
    body = {
        "email": "cliente@example.com",
        "name": "Juan Pérez",
        "amount": 150.0,
        "delivery_date": "2025-02-10",
        "machinery_name": "Excavadora CAT 320",
        "machinery_details": "Excavadora hidráulica con capacidad de 20 toneladas",
        "rental_days": 5,
    }
    body.update(overrides)
    return body


def test_send_email(client, mailer):
    r = client.post("/email/send-email", json=_email_body())

    assert r.status_code == 200
    assert r.json() == {"message": "Correo enviado exitosamente"}
    assert mailer.sent[0]["to"] == "cliente@example.com"
    assert "Excavadora CAT 320" in mailer.sent[0]["html"]
    assert "$150.00" in mailer.sent[0]["text"]


def test_send_email_requires_every_field(client, mailer):
    body = _email_body()
    del body["machinery_details"]

    r = client.post("/email/send-email", json=body)

    assert r.status_code == 400
    assert [d["field"] for d in r.json()["details"]] == ["machinery_details"]
    assert mailer.sent == []


def test_send_email_provider_failure_is_500(client, mailer):
    mailer.fail = True

    r = client.post("/email/send-email", json=_email_body())

    assert r.status_code == 500
    assert r.json()["error"] == "Error al enviar el correo"


def test_confirmation_template():
    subject, text, html = build_reservation_confirmation(
        name="Ana",
        amount=1234.5,
        delivery_date="2025-03-01",
        machinery_name="Grúa",
        machinery_details="Grúa telescópica",
        rental_days=2,
    )

    assert subject == "Confirmación de Reserva"
    assert "Hola Ana" in text
    assert "$1234.50" in text
    assert "<strong>Ana</strong>" in html
    assert "2 días" in html
