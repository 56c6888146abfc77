USER_EMAIL = "buyer@example.com"
USER_PASSWORD = "buyer-pass-123"


def test_register_then_login_and_logout(client):
    response = client.post(
        "/auth/register",
        json={"email": "New@Example.com", "name": "New", "password": "new-pass-123"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "new@example.com"
    assert response.json()["role"] == "USER"

    assert client.post("/auth/login", json={"email": "new@example.com", "password": "new-pass-123"}).status_code == 200
    assert client.get("/auth/me").json()["email"] == "new@example.com"

    assert client.post("/auth/logout").status_code == 204
    assert client.get("/auth/me").status_code == 401


def test_duplicate_email_is_rejected(client, user):
    response = client.post(
        "/auth/register",
        json={"email": USER_EMAIL.upper(), "name": "Again", "password": "another-pass"},
    )

    assert response.status_code == 400
    assert response.json()["field"] == "email"


def test_wrong_password(client, user):
    response = client.post("/auth/login", json={"email": USER_EMAIL, "password": USER_PASSWORD + "x"})

    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_REQUIRED"


def test_short_password_is_invalid(client):
    response = client.post("/auth/register", json={"email": "a@b.co", "name": "A", "password": "short"})
    assert response.status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
