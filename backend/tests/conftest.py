import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.user import User

TEST_DB_URL = "sqlite:///./test_placewiki.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "alice": User(username="alice", first_name="Alice", last_name="Liddell", email="alice@example.com"),
        "bob": User(username="bob", first_name="Bob", last_name="Builder", email="bob@example.com"),
        "carol": User(username="carol", first_name="Carol", last_name="Inactive", is_active=False),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def get_token(client, username: str) -> str:
    resp = client.post("/api/auth/login", json={"username": username})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, username: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, username)}"}


def entry_payload(**overrides) -> dict:
    payload = {
        "title": "Coffee Shop",
        "address": "1 Market St, San Francisco, CA",
        "longitude": -122.42,
        "latitude": 37.77,
        "description": "Espresso and pastries",
        "tags": [{"name": "food", "classification": "category"}],
    }
    payload.update(overrides)
    return payload


def create_entry(client, headers: dict, **overrides) -> dict:
    resp = client.post("/api/entries", json=entry_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
