"""Tests for signup, login and the current user endpoint."""


def test_signup_returns_user(client):
    response = client.post(
        "/api/user/signup",
        json={"username": "bob", "password": "secret123", "email": "bob@example.com"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "bob"
    assert data["email"] == "bob@example.com"
    assert "password" not in data
    assert "password_hash" not in data


def test_signup_rejects_duplicate_username(client):
    payload = {"username": "bob", "password": "secret123"}
    client.post("/api/user/signup", json=payload)

    response = client.post("/api/user/signup", json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "username", "message": "Username already taken"}]


def test_signup_validates_input(client):
    response = client.post("/api/user/signup", json={"username": "a!", "password": "123"})

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"username", "password"}


def test_login_with_wrong_password(client):
    client.post("/api/user/signup", json={"username": "bob", "password": "secret123"})

    response = client.post("/api/user/login", json={"username": "bob", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect username or password"


def test_login_with_unknown_user(client):
    response = client.post("/api/user/login", json={"username": "ghost", "password": "secret123"})

    assert response.status_code == 401


def test_me_returns_current_user(client, auth_headers):
    response = client.get("/api/user/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_me_requires_token(client):
    assert client.get("/api/user/me").status_code == 401
