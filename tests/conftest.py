import pytest
from fastapi.testclient import TestClient

from voice_planner.api.deps import get_db
from voice_planner.main import app
from voice_planner.store.database import connect
from voice_planner.store.users import create_user


@pytest.fixture
def db():
    conn = connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def user(db):
    return create_user(db, "ada@example.com", "Ada Lovelace")


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
