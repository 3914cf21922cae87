from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from auth import PasscodeAuthenticator
from catalog import Catalog
from descriptions import StaticDescriptionProvider
from storage import MemoryStore

ADMIN_PASSCODE = "1212"
GENERATED = "Generated description."


def fixed_clock():
    return datetime(2026, 10, 19, 12, 30)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_catalog(store):
    def _make(**kwargs):
        kwargs.setdefault("describer", StaticDescriptionProvider(GENERATED))
        kwargs.setdefault("authenticator", PasscodeAuthenticator(ADMIN_PASSCODE))
        kwargs.setdefault("clock", fixed_clock)
        return Catalog(kwargs.pop("store", store), **kwargs)
    return _make


@pytest.fixture
def catalog(make_catalog):
    return make_catalog()


@pytest.fixture
def client(catalog):
    from main import app, get_catalog

    app.dependency_overrides[get_catalog] = lambda: catalog
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    res = client.post("/auth/signin", json={"email": "boss@texpress.com", "password": ADMIN_PASSCODE})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['access_token']}"}
