"""Pytest configuration and fixtures for the store rating API tests."""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from main import create_app
from store_rating.core.config import Settings
from store_rating.core.security import create_access_token
from store_rating.database import Base, build_engine, build_session_factory, create_tables
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.services import DashboardService, RatingService, StoreService, UserService

VALID_PASSWORD = "Abcdefg1!"
VALID_ADDRESS = "1 Main St"


def make_name(label: str, length: int = 25) -> str:
    """A name of exactly ``length`` characters starting with ``label``."""
    return (label + " " + "x" * length)[:length]


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def data(db_session):
    return DataAccess(db_session)


@pytest.fixture
def user_service(data):
    return UserService(data)


@pytest.fixture
def store_service(data):
    return StoreService(data)


@pytest.fixture
def rating_service(data):
    return RatingService(data)


@pytest.fixture
def dashboard_service(data):
    return DashboardService(data)


@pytest.fixture
def create_user(user_service):
    """Factory for users with valid defaults."""
    counter = {"n": 0}

    def _create(role=Role.NORMAL_USER, store_id=None, email=None, name=None, password=VALID_PASSWORD):
        counter["n"] += 1
        return user_service.create_user(
            name=name or make_name(f"Test User {counter['n']}"),
            email=email or f"user{counter['n']}@example.com",
            password=password,
            address=VALID_ADDRESS,
            role=role,
            store_id=store_id,
        )

    return _create


@pytest.fixture
def create_store(store_service):
    """Factory for stores with valid defaults."""
    counter = {"n": 0}

    def _create(name=None, email=None, address="10 Elm Street"):
        counter["n"] += 1
        return store_service.create_store(
            name=name or make_name(f"Test Store {counter['n']}", 30),
            email=email or f"store{counter['n']}@example.com",
            address=address,
        )

    return _create


@pytest.fixture
def app():
    return create_app(Settings(database_url="sqlite://", jwt_secret="test-secret-key", log_level="WARNING"))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_data(app, client):
    """DataAccess bound to the same database the test client talks to."""
    session = app.state.session_factory()
    try:
        yield DataAccess(session)
    finally:
        session.close()


@pytest.fixture
def auth_header(app):
    def _header(user_id: int, role: Role) -> dict:
        token = create_access_token(user_id, role, settings=app.state.settings)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def admin(api_data):
    return UserService(api_data).create_user(
        name="Platform System Administrator",
        email="admin@example.com",
        password="Admin@1234",
        address="Head Office",
        role=Role.SYSTEM_ADMIN,
    )


@pytest.fixture
def admin_headers(admin, auth_header):
    return auth_header(admin.id, Role.SYSTEM_ADMIN)
