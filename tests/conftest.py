# File: tests/conftest.py

import os

# Must be set before vidshare.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vidshare.api.deps import get_db, get_password_hasher, get_token_issuer
from vidshare.db.init_db import init_db
from vidshare.main import app
from vidshare.models.base import Base
from vidshare.services.subscription_service import SubscriptionGraph
from vidshare.services.user_service import UserDirectory


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def directory(db):
    return UserDirectory(db, get_password_hasher(), get_token_issuer())


@pytest.fixture
def graph(db):
    return SubscriptionGraph(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user over HTTP and return (user_id, token)."""

    def _register(username: str, email: str, password: str = "123456"):
        resp = client.post(
            "/api/v1/users",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["user"]["token"]
        claims = get_token_issuer().verify(token)
        return claims["userId"], token

    return _register
