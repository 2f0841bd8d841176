import pytest
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from retail_api.core import config
from retail_api.core.errors import InternalError
from retail_api.core.security import MissingSecretError
from retail_api.db.mongo import get_db
from retail_api.main import app
from retail_api.services import catalog_service


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unknown_route(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


def test_database_error_is_reported(client, monkeypatch):
    def broken(db, **kwargs):
        raise PyMongoError("connection reset")

    monkeypatch.setattr(catalog_service, "list_products", broken)
    resp = client.get("/api/products")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Server Error", "error": "connection reset"}


def test_startup_requires_secret(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", None)
    with pytest.raises(MissingSecretError):
        with TestClient(app):
            pass


def test_unexpected_error_is_reported(db, monkeypatch):
    def broken(db, product_id):
        raise KeyError("price")

    monkeypatch.setattr(catalog_service, "get_product", broken)
    monkeypatch.setitem(app.dependency_overrides, get_db, lambda: db)
    # the server error middleware re-raises after responding
    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/api/products/64b7f0c2a1b2c3d4e5f60718")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Server Error", "error": "'price'"}


def test_raised_internal_error(client, monkeypatch):
    def broken(db, product_id):
        raise InternalError(message="Catalog unavailable")

    monkeypatch.setattr(catalog_service, "get_product", broken)
    resp = client.get("/api/products/64b7f0c2a1b2c3d4e5f60718")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Catalog unavailable"}


def test_internal_error_defaults():
    err = InternalError(ValueError("boom"))
    assert err.status_code == 500
    assert err.to_content() == {"message": "Server Error", "error": "boom"}
