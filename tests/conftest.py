"""Pytest configuration: in-memory MongoDB and a fixed authenticated user."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from auth import get_current_user
from database import Store, get_store
from main import app

USER = {"id": "64b7f0c2a1b2c3d4e5f60001", "name": "Ada Buyer", "email": "ada@example.com"}
OTHER_USER = {"id": "64b7f0c2a1b2c3d4e5f60002", "name": "Bob Buyer", "email": "bob@example.com"}


@pytest.fixture
def store():
    """Fresh mongomock-backed store for every test."""
    return Store(name="storefront_test", client=mongomock.MongoClient())


@pytest.fixture
def anon_client(store):
    """Client with the store overridden but real token authentication."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client):
    """Client authenticated as USER."""
    app.dependency_overrides[get_current_user] = lambda: USER
    return anon_client


@pytest.fixture
def act_as():
    """Switch the authenticated user mid-test."""
    def _act_as(user):
        app.dependency_overrides[get_current_user] = lambda: user
    return _act_as


@pytest.fixture
def make_product(client):
    """Create a product through the API and return its JSON."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        payload = {
            "name": f"Product {counter['n']}",
            "category": "Misc",
            "price": 10.0,
            "description": "A product",
        }
        payload.update(fields)
        res = client.post("/api/products", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["product"]
    return _make
