import json

import jwt
import pytest

from rfid_api.services.auth_service import generate_reset_token


USER = {"email": "a@x.com", "contraseña": "secret", "nombre": "Ana", "telefono": "555"}


@pytest.fixture
def usuario(client):
    return client.post("/api/usuarios", json=USER).get_json()["data"]


def stored_users(db_path):
    return json.loads(db_path.read_text(encoding="utf-8"))["usuarios"]


def test_register_user(client, db_path):
    res = client.post("/api/usuarios", json=USER)

    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["email"] == "a@x.com"
    assert data["telefono"] == "555"
    assert "contraseña" not in data

    stored = stored_users(db_path)[0]
    assert stored["id"] == data["id"]
    assert stored["contraseña"] != "secret"


def test_register_requires_fields(client):
    res = client.post("/api/usuarios", json={"email": "a@x.com"})

    assert res.status_code == 400
    assert set(res.get_json()["missing"]) == {"contraseña", "nombre"}


def test_register_duplicate_email(client, usuario, db_path):
    res = client.post("/api/usuarios", json=USER)

    assert res.status_code == 400
    assert len(stored_users(db_path)) == 1


def test_check_email(client, usuario):
    assert client.get("/api/check-email?email=a@x.com").get_json() == {"success": True, "exists": True}
    assert client.get("/api/check-email?email=b@x.com").get_json() == {"success": True, "exists": False}
    assert client.get("/api/check-email").status_code == 400


def test_list_users_filters_by_credentials(client, usuario):
    assert len(client.get("/api/usuarios").get_json()["data"]) == 1

    match = client.get("/api/usuarios", query_string={"email": "a@x.com", "contraseña": "secret"})
    assert match.get_json()["data"] == [usuario]

    wrong = client.get("/api/usuarios", query_string={"email": "a@x.com", "contraseña": "nope"})
    assert wrong.get_json()["data"] == []


def test_get_user(client, usuario):
    assert client.get(f"/api/usuarios/{usuario['id']}").get_json()["data"] == usuario
    assert client.get("/api/usuarios/unknown").status_code == 404


def test_login_returns_token(client, app, usuario):
    res = client.post("/api/usuarios/login", json={"email": "a@x.com", "contraseña": "secret"})

    assert res.status_code == 200
    payload = jwt.decode(res.get_json()["token"], app.config["SECRET_KEY"], algorithms=["HS256"])
    assert payload["id"] == usuario["id"]


def test_login_bad_password(client, usuario):
    res = client.post("/api/usuarios/login", json={"email": "a@x.com", "contraseña": "nope"})

    assert res.status_code == 401


def test_update_user(client, usuario):
    res = client.put(f"/api/usuarios/{usuario['id']}", json={"nombre": "Ana Maria"})

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["nombre"] == "Ana Maria"
    assert data["telefono"] == "555"


def test_update_user_password_is_hashed(client, usuario, db_path):
    client.put(f"/api/usuarios/{usuario['id']}", json={"contraseña": "other"})

    assert stored_users(db_path)[0]["contraseña"] != "other"
    res = client.post("/api/usuarios/login", json={"email": "a@x.com", "contraseña": "other"})
    assert res.status_code == 200


def test_update_unknown_user(client, usuario, db_path):
    before = db_path.read_bytes()

    assert client.put("/api/usuarios/unknown", json={"nombre": "x"}).status_code == 404
    assert db_path.read_bytes() == before


def test_delete_user(client, usuario):
    res = client.delete(f"/api/usuarios/{usuario['id']}")

    assert res.status_code == 200
    assert res.get_json()["data"] == usuario
    assert client.get(f"/api/usuarios/{usuario['id']}").status_code == 404
    assert client.delete(f"/api/usuarios/{usuario['id']}").status_code == 404


@pytest.mark.parametrize("field", ["nuevaContraseña", "nuevaContrasena"])
def test_change_password(client, usuario, field):
    res = client.put("/api/usuarios/cambiar-contrasena", json={"email": "a@x.com", field: "changed"})

    assert res.status_code == 200
    login = client.post("/api/usuarios/login", json={"email": "a@x.com", "contraseña": "changed"})
    assert login.status_code == 200


def test_change_password_unknown_user(client):
    res = client.put("/api/usuarios/cambiar-contrasena", json={"email": "b@x.com", "nuevaContraseña": "x"})

    assert res.status_code == 404


def test_change_password_requires_fields(client):
    res = client.put("/api/usuarios/cambiar-contrasena", json={"email": "a@x.com"})

    assert res.status_code == 400


def test_password_reset_flow(client, app, usuario, caplog):
    caplog.set_level("INFO")
    res = client.post("/api/request-password-reset", json={"email": "a@x.com"})

    assert res.status_code == 200
    assert "a@x.com" in caplog.text

    with app.app_context():
        token = generate_reset_token("a@x.com")

    res = client.post("/api/reset-password", json={"token": token, "nuevaContraseña": "fresh"})
    assert res.status_code == 200

    login = client.post("/api/usuarios/login", json={"email": "a@x.com", "contraseña": "fresh"})
    assert login.status_code == 200


def test_password_reset_unknown_email(client):
    res = client.post("/api/request-password-reset", json={"email": "b@x.com"})

    assert res.status_code == 404


def test_reset_rejects_access_token(client, usuario):
    token = client.post(
        "/api/usuarios/login", json={"email": "a@x.com", "contraseña": "secret"}
    ).get_json()["token"]

    res = client.post("/api/reset-password", json={"token": token, "nuevaContraseña": "fresh"})

    assert res.status_code == 401


@pytest.mark.parametrize("method, url, body", [
    ("post", "/api/usuarios", "hola"),
    ("post", "/api/usuarios", ["x"]),
    ("post", "/api/usuarios/login", ["x"]),
    ("post", "/api/request-password-reset", ["x"]),
    ("put", "/api/usuarios/cambiar-contrasena", ["a"]),
    ("post", "/api/reset-password", ["x"]),
])
def test_non_object_bodies_are_rejected(client, db_path, method, url, body):
    before = db_path.read_bytes()

    res = getattr(client, method)(url, json=body)

    assert res.status_code == 400
    assert res.get_json()["success"] is False
    assert db_path.read_bytes() == before


def test_check_email_on_corrupt_entries(client, db_path):
    db_path.write_text(json.dumps({"usuarios": [1]}), encoding="utf-8")

    assert client.get("/api/check-email?email=a@x.com").status_code == 500
