"""
Tests for the authentication API
"""
import pytest


def test_signup_creates_user_and_sets_cookie(client):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": "Ada@Example.com", "password": "correct horse"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Ada"
    assert body["email"] == "ada@example.com"
    assert body["assistantName"] is None
    assert body["_id"]
    assert "password" not in body and "password_hash" not in body
    assert response.cookies.get("token")
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "max-age=604800" in set_cookie


@pytest.mark.parametrize("payload", [
    {"email": "a@example.com", "password": "pw123456"},
    {"name": "A", "password": "pw123456"},
    {"name": "A", "email": "a@example.com"},
    {"name": "  ", "email": "a@example.com", "password": "pw123456"},
])
def test_signup_requires_all_fields(client, payload):
    response = client.post("/api/auth/signup", json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": "All fields required"}


def test_signup_rejects_duplicate_email(client, signed_up):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Other", "email": "ADA@example.com", "password": "whatever1"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


def test_signin_with_valid_credentials(client, signed_up):
    client.cookies.clear()

    response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "correct horse"})

    assert response.status_code == 200
    assert response.json()["_id"] == signed_up["_id"]
    assert response.cookies.get("token")


@pytest.mark.parametrize("email,password", [
    ("ada@example.com", "wrong horse"),
    ("nobody@example.com", "correct horse"),
])
def test_signin_with_bad_credentials(client, signed_up, email, password):
    response = client.post("/api/auth/signin", json={"email": email, "password": password})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid credentials"}


def test_signin_requires_fields(client):
    response = client.post("/api/auth/signin", json={"email": "ada@example.com"})

    assert response.status_code == 400


def test_logout_clears_cookie(client, signed_up):
    response = client.get("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out"}
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("token=")
    assert "max-age=0" in set_cookie
