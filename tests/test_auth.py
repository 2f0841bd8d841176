from datetime import datetime, timedelta, timezone

from jose import jwt

from retail_api.core.security import issue_token
from retail_api.db.mongo import USERS
from conftest import PASSWORD


def register(client, email="new@example.com", password="pa55word"):
    return client.post("/api/auth/register", json={"name": "New Person", "email": email, "password": password})


def test_register_returns_token_and_user(client, db):
    resp = register(client, email="New@Example.com")
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "customer"
    assert "password" not in body["user"]
    stored = db[USERS].find_one({"email": "new@example.com"})
    assert stored["password"] != "pa55word"


def test_register_duplicate_email(client, db):
    assert register(client).status_code == 201
    resp = register(client)
    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists"
    assert db[USERS].count_documents({"email": "new@example.com"}) == 1


def test_register_rejects_bad_payload(client, db):
    resp = client.post("/api/auth/register", json={"name": "X", "email": "not-an-email", "password": "pa55word"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"
    assert db[USERS].count_documents({}) == 0


def test_login_token_resolves_profile(client, customer):
    resp = client.post("/api/auth/login", json={"email": "casey@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["token"]

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.status_code == 200
    assert profile.json()["_id"] == str(customer["_id"])
    assert profile.json()["email"] == "casey@example.com"
    assert "password" not in profile.json()


def test_login_wrong_password(client, customer):
    resp = client.post("/api/auth/login", json={"email": "casey@example.com", "password": "wrong-one"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert resp.status_code == 401


def test_profile_without_token(client):
    resp = client.get("/api/auth/profile")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authorized, no token"


def test_profile_with_expired_token(client, customer):
    token = issue_token(str(customer["_id"]), expires_delta=timedelta(seconds=-5))
    resp = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authorized, invalid token"


def test_profile_with_tampered_token(client, customer):
    token = jwt.encode(
        {"id": str(customer["_id"]), "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "someone-elses-secret",
        algorithm="HS256",
    )
    resp = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_profile_for_deleted_user(client, db, customer, customer_headers):
    db[USERS].delete_one({"_id": customer["_id"]})
    resp = client.get("/api/auth/profile", headers=customer_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


def test_login_with_malformed_email(client, customer):
    resp = client.post("/api/auth/login", json={"email": "casey-at-example", "password": PASSWORD})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"
