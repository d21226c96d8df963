"""
Shared fixtures: in-memory SQLite database and API clients.
"""
import os

# Must be set before tribute.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key-for-session-cookies"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tribute.models  # noqa: F401
from tribute.db.base import Base
from tribute.db.session import get_db
from tribute.main import app
from tribute.models.user import User, UserRole

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_client(db):
    """Factory for independent clients (each keeps its own cookie jar)."""
    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def register():
    """Register through the API with sensible defaults."""
    def _register(client, username="neo", email=None, password="password123", **extra):
        payload = {
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        }
        payload.update(extra)
        return client.post("/api/auth/register", json=payload)
    return _register


@pytest.fixture
def set_role(db):
    """Change a user's role directly in the database."""
    def _set_role(username, role: UserRole):
        db.expire_all()
        user = db.query(User).filter(User.username == username).first()
        user.role = role
        db.commit()
        return user
    return _set_role


@pytest.fixture
def admin_client(make_client, register, set_role):
    client = make_client()
    register(client, "root", password="adminpass1")
    set_role("root", UserRole.ADMIN)
    return client


@pytest.fixture
def moderator_client(make_client, register, set_role):
    client = make_client()
    register(client, "mod", password="modpass123")
    set_role("mod", UserRole.MODERATOR)
    return client


@pytest.fixture
def member_client(make_client, register):
    client = make_client()
    register(client, "neo")
    return client


@pytest.fixture
def category(admin_client):
    """A category created through the API."""
    response = admin_client.post(
        "/api/forum/categories",
        json={"name": "General Discussion", "description": "Talk about anything"}
    )
    assert response.status_code == 201
    return response.json()
