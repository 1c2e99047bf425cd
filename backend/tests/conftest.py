import os
import uuid
from datetime import datetime, timedelta, timezone

# Ensure JWT_SECRET exists before importing chirpy.main (create_app() calls require_jwt_secret()).
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
os.environ.setdefault("POLKA_KEY", "test_polka_key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chirpy.core.base import Base
from chirpy.core import config as app_config
from chirpy.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
from chirpy.models.user import User  # noqa: F401
from chirpy.models.chirp import Chirp  # noqa: F401
from chirpy.models.refresh_token import RefreshToken  # noqa: F401

from chirpy.core.database import get_db

TEST_SECRET = "test_jwt_secret"
TEST_POLKA_KEY = "test_polka_key"
TEST_PASSWORD = "04234"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # The in-memory DB persists across tests with StaticPool; reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests tweak the process-global settings object; restore after each test.
    """
    keys = ["JWT_SECRET", "POLKA_KEY", "PLATFORM", "ENABLE_RATE_LIMITING"]
    original = {k: getattr(app_config.settings, k) for k in keys}
    app_config.settings.JWT_SECRET = TEST_SECRET
    app_config.settings.POLKA_KEY = TEST_POLKA_KEY
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def app(db_session):
    # Fresh app per test so the hit counter and context start clean.
    from chirpy.main import create_app

    fastapi_app = create_app()

    def override_get_db():
        yield db_session
    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def http(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def users(db_session):
    """
    Two distinct users for ownership / isolation tests.
    """
    user_a = User(email="walt@breakingbad.com", hashed_password=hash_password(TEST_PASSWORD))
    user_b = User(email="saul@bettercall.com", hashed_password=hash_password(TEST_PASSWORD))
    db_session.add_all([user_a, user_b])
    db_session.commit()
    db_session.refresh(user_a)
    db_session.refresh(user_b)
    return user_a, user_b


@pytest.fixture()
def auth_header():
    from chirpy.auth.tokens import mint_access_token

    def _auth_header(user_id: uuid.UUID, secret: str = TEST_SECRET) -> dict[str, str]:
        return {"Authorization": f"Bearer {mint_access_token(user_id, secret)}"}

    return _auth_header


class FakeClock:
    """Manually advanced UTC clock for refresh token expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock()
