"""Shared fixtures: a memory-backed store and a FastAPI client bound to it."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from database import MemoryBackend, Store
from main import app, get_state
from notifications import NotificationDispatcher
from schemas import Product
from state import StoreState


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return Store(backend)


@pytest.fixture
def dispatcher():
    executor = ThreadPoolExecutor(max_workers=2)
    yield NotificationDispatcher(timeout=1.0, email_endpoint="https://email.test/send", executor=executor)
    executor.shutdown(wait=True)


@pytest.fixture
def state(store, dispatcher):
    return StoreState(store, dispatcher)


@pytest.fixture
def client(state):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    res = client.post("/api/admin/login", json={"password": "admin"})
    assert res.status_code == 200
    return {"X-Admin-Token": res.json()["token"]}


def make_product(id="p1", name="Widget", price=10.0, category="Tools", **kwargs):
    return Product(id=id, name=name, price=price, category=category, **kwargs)
