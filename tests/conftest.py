"""
Shared fixtures: in-memory SQLite database, callers, local media storage
and an API client with the database and storage dependencies overridden.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from model import load_all_models
from model.base import Base
from src.social import IdentityClaims, ProfileManager, require_caller
from src.storage import LocalFileStorage

load_all_models()


@pytest.fixture(scope='function')
def engine():
    """One in-memory SQLite database per test, shared across threads."""
    engine = create_engine(
        'sqlite://',
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(
        base_dir=str(tmp_path / "uploads"),
        base_url="http://testserver",
        signing_key="test-media-signing-key",
        upload_ttl_sec=60,
    )


@pytest.fixture
def make_caller(db_session):
    """Resolve a Caller for a provider subject, creating the user on first use."""
    def _make(sub, name=None, email=None):
        identity = IdentityClaims(sub=sub, name=name or sub.title(), email=email or f"{sub}@example.com")
        return require_caller(db_session, identity)
    return _make


@pytest.fixture
def make_profile(db_session, storage):
    def _make(caller, display_name=None, role="shopper"):
        manager = ProfileManager(db_session, storage)
        return manager.create_profile(caller, role, display_name or caller.identity.name)
    return _make


@pytest.fixture
def alice(make_caller):
    return make_caller("auth0|alice", name="Alice")


@pytest.fixture
def bob(make_caller):
    return make_caller("auth0|bob", name="Bob")


# ===================================================================
# HTTP
# ===================================================================

def make_token(sub, **claims):
    """Bearer token signed the way the identity provider would sign it."""
    payload = {
        "sub": sub,
        "name": sub.split("|")[-1].title(),
        "email": f"{sub.split('|')[-1]}@example.com",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.AUTH_JWT_KEY, algorithm=settings.AUTH_JWT_ALGORITHMS[0])


def auth_headers(sub, **claims):
    return {"Authorization": f"Bearer {make_token(sub, **claims)}"}


@pytest.fixture
def client(session_factory, storage):
    from fastapi.testclient import TestClient

    from config.db import get_db
    from src.app import app
    from src.storage import get_storage_backend

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage_backend] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
