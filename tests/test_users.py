from app.models.user import User


def test_create_user_hashes_password_and_hides_it(client, app, factory):
    user = factory.user(email="ana@example.com", password="secreto123")

    assert user["email"] == "ana@example.com"
    assert user["phoneNumber"].startswith("555")
    assert "password" not in user

    with app.state.session_factory() as db:
        stored = db.query(User).filter(User.id == user["id"]).first()
        assert stored.password != "secreto123"
        assert stored.password.startswith("$2")


def test_duplicate_email_is_rejected(client, factory):
    factory.user(email="dup@example.com")

    r = client.post(
        "/users/",
        json={"name": "Otro", "email": "dup@example.com", "password": "secreto123", "phoneNumber": "5551112222"},
    )

    assert r.status_code == 400
    assert r.json() == {"error": "El correo electrónico ya está en uso"}
    assert [u["email"] for u in client.get("/users/").json()].count("dup@example.com") == 1


def test_missing_fields_answer_400_with_details(client):
    r = client.post("/users/", json={"name": "Sin correo"})

    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Faltan campos obligatorios o son inválidos"
    fields = {d["field"] for d in body["details"]}
    assert "email" in fields
    assert "password" in fields


def test_login_with_valid_and_invalid_credentials(client, factory):
    user = factory.user(email="login@example.com", password="secreto123")

    ok = client.post("/users/login", json={"email": "login@example.com", "password": "secreto123"})
    assert ok.status_code == 200
    assert ok.json()["id"] == user["id"]

    bad = client.post("/users/login", json={"email": "login@example.com", "password": "otra-clave"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Correo o contraseña incorrectos"}

    unknown = client.post("/users/login", json={"email": "nadie@example.com", "password": "secreto123"})
    assert unknown.status_code == 401


def test_update_user_keeps_password_when_not_sent(client, factory):
    user = factory.user(email="cambia@example.com", password="secreto123")

    r = client.put(
        f"/users/{user['id']}",
        json={"name": "Nombre Nuevo", "email": "cambia@example.com", "phoneNumber": "5559998888"},
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Nombre Nuevo"
    assert r.json()["phoneNumber"] == "5559998888"

    login = client.post("/users/login", json={"email": "cambia@example.com", "password": "secreto123"})
    assert login.status_code == 200


def test_update_user_rejects_email_of_another_user(client, factory):
    factory.user(email="primero@example.com")
    second = factory.user(email="segundo@example.com")

    r = client.put(
        f"/users/{second['id']}",
        json={"name": "Segundo", "email": "primero@example.com", "phoneNumber": "5550000000"},
    )

    assert r.status_code == 400


def test_get_and_delete_user(client, factory):
    user = factory.user()

    assert client.get(f"/users/{user['id']}").status_code == 200
    assert len(client.get("/users/").json()) == 1

    r = client.delete(f"/users/{user['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Usuario eliminado exitosamente"}

    missing = client.get(f"/users/{user['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Usuario no encontrado"}


def test_deleting_user_removes_its_reservations(client, factory):
    reservation = factory.reservation()

    r = client.delete(f"/users/{reservation['userId']}")
    assert r.status_code == 200

    assert client.get(f"/reservations/{reservation['id']}").status_code == 404


def test_email_taken_between_check_and_commit_on_update(client, factory, monkeypatch):
    from app.routers import users as users_router

    factory.user(email="primero@example.com")
    second = factory.user(email="segundo@example.com")
    # Simula otro request que registra el correo después de la verificación
    monkeypatch.setattr(users_router, "email_in_use", lambda *args, **kwargs: False)

    r = client.put(
        f"/users/{second['id']}",
        json={"name": "Segundo", "email": "primero@example.com", "phoneNumber": "5550000000"},
    )

    assert r.status_code == 400
    assert r.json() == {"error": "El correo electrónico ya está en uso"}
    assert client.get(f"/users/{second['id']}").json()["email"] == "segundo@example.com"
