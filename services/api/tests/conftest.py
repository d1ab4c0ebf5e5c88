import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tocr.core.security import create_access_token
from tocr.db.session import get_db
from tocr.main import app
from tocr.models import Base
from tocr.models.user import User


def _make_engine():
    # Override at runtime: TEST_DATABASE_URL=postgresql+psycopg://... pytest
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        return create_engine(url, pool_pre_ping=True)
    # In-memory SQLite so tests run without external services.
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="session")
def engine():
    eng = _make_engine()
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    tx = connection.begin()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=connection
    )
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        tx.rollback()
        connection.close()


@pytest.fixture()
def session_factory():
    """Sessions that really commit/roll back, for transaction-level tests."""
    eng = _make_engine()
    Base.metadata.create_all(bind=eng)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=eng)
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _auth_headers(db_session, *, email: str, role: str) -> dict:
    user = User(email=email, name=email.split("@")[0], role=role)
    db_session.add(user)
    db_session.flush()
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def editor_headers(db_session):
    return _auth_headers(db_session, email="editor@example.com", role="EDITOR")


@pytest.fixture()
def viewer_headers(db_session):
    return _auth_headers(db_session, email="viewer@example.com", role="VIEWER")
