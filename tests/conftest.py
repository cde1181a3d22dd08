"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from app.features.users import UserStore
from app.features.users.models import UserPayload
from app.main import create_app


@pytest.fixture
def store():
    """Empty user store, reset after the test."""
    user_store = UserStore()
    yield user_store
    user_store.reset()


@pytest.fixture
def client(store):
    """TestClient bound to a fresh app that owns the ``store`` fixture."""
    with TestClient(create_app(store)) as test_client:
        yield test_client


@pytest.fixture
def make_payload():
    """Build a create/update payload with valid defaults."""
    def _make(username="alice", age=30, email="alice@example.com"):
        return UserPayload(username=username, age=age, email=email)
    return _make
