from tests.conftest import auth_headers


def test_register_then_login(client):
    resp = client.post(
        "/api/users",
        json={"username": "dave", "first_name": "Dave", "last_name": "Grohl", "email": "dave@example.com"},
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["username"] == "dave"
    assert resp.json()["is_active"] is True

    headers = auth_headers(client, "dave")
    me = client.get("/api/auth/me", headers=headers)
    assert me.json()["email"] == "dave@example.com"


def test_register_duplicate_username(client, seed_users):
    resp = client.post("/api/users", json={"username": "alice"})
    assert resp.status_code == 409
    assert resp.json()["details"]["field"] == "username"


def test_register_duplicate_email(client, seed_users):
    resp = client.post("/api/users", json={"username": "alice2", "email": "alice@example.com"})
    assert resp.status_code == 409
    assert resp.json()["details"]["field"] == "email"


def test_register_blank_username(client):
    resp = client.post("/api/users", json={"username": "   "})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_get_user_by_username(client, seed_users):
    resp = client.get("/api/users/bob")
    assert resp.status_code == 200
    assert resp.json()["last_name"] == "Builder"

    missing = client.get("/api/users/nobody")
    assert missing.status_code == 404
    assert missing.json()["details"]["entity_type"] == "User"
