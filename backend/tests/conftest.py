"""Test configuration and fixtures for Matchup backend tests."""

import os
import sys
import pathlib
import pytest
from unittest.mock import patch


from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

BACKEND_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Set test environment before importing backend modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SESSION_SECRET_KEY"] = "test_secret_key"
os.environ["TESTING_MODE"] = "True"


@pytest.fixture(autouse=True)
def test_engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Ensure models are imported so tables are registered in SQLModel.metadata
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_session(test_engine):
    """Create a test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(autouse=True)
def reset_shared_state():
    """The change feed and the profile cache are process globals."""
    from services.cache import cache
    from services.realtime import feed

    yield
    feed.clear()
    cache.clear()


@pytest.fixture
def override_get_session(test_session):
    """Override the get_session dependency for testing."""

    def _override_get_session():
        yield test_session

    return _override_get_session


@pytest.fixture
def test_app(override_get_session):
    """Create a test FastAPI application."""
    # Skip migrations in tests, the tables come from create_all
    with patch("app.update_database"):
        from app import create_app

        app = create_app()
        from models.common import get_session

        app.dependency_overrides[get_session] = override_get_session
        yield app
        app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def make_user(test_session):
    """Factory creating users straight in the database."""
    from models.auth import User

    def _make_user(username: str, **fields) -> User:
        user = User(
            id=fields.pop("id", f"id-{username}"),
            email=fields.pop("email", f"{username}@example.com"),
            username=username,
            first_name=fields.pop("first_name", username.capitalize()),
            last_name=fields.pop("last_name", "Test"),
            **fields,
        )
        test_session.add(user)
        test_session.commit()
        return user

    return _make_user


@pytest.fixture
def users(make_user):
    return make_user("alice"), make_user("bob"), make_user("carol")


@pytest.fixture
def login_as(test_app):
    """Impersonate a user on the routes, without going through sign-in."""
    from routes.deps import get_current_user

    def _login_as(user):
        test_app.dependency_overrides[get_current_user] = lambda: user

    return _login_as
