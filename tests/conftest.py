import os

os.environ.setdefault("JWT_SECRET", "test-secret")

import mongomock
import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from retail_api.core.security import hash_password, issue_token
from retail_api.db.mongo import get_db, ensure_indexes, USERS, PRODUCTS
from retail_api.main import app

PASSWORD = "secret123"


@pytest.fixture
def db():
    database = mongomock.MongoClient()["retail_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, name, email, role="customer"):
    now = datetime.now(timezone.utc)
    user = {
        "name": name,
        "email": email,
        "password": hash_password(PASSWORD),
        "role": role,
        "createdAt": now,
        "updatedAt": now,
    }
    user["_id"] = db[USERS].insert_one(user).inserted_id
    return user


def bearer(user):
    return {"Authorization": f"Bearer {issue_token(str(user['_id']))}"}


@pytest.fixture
def customer(db):
    return make_user(db, "Casey Buyer", "casey@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, "Alex Admin", "admin@example.com", role="admin")


@pytest.fixture
def customer_headers(customer):
    return bearer(customer)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


def product_doc(**overrides):
    doc = {
        "name": "Canvas Tote",
        "description": "Heavy cotton tote bag",
        "price": 10.0,
        "image": "/images/tote.png",
        "category": "bags",
        "stock": 5,
        "createdAt": datetime.now(timezone.utc),
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def three_products(db):
    ids = db[PRODUCTS].insert_many([
        product_doc(name="Ten", price=10),
        product_doc(name="Thirty", price=30),
        product_doc(name="Twenty", price=20),
    ]).inserted_ids
    return ids
