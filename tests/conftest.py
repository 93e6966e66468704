import binascii
import hashlib
import os

# Must be set before the application modules read their settings
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["TMDB_ACCESS_TOKEN"] = ""
os.environ["JWT_SECRET"] = "test-secret-key"

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import movie_tracker.models  # noqa: F401
from movie_tracker.database import Base, get_db
from movie_tracker.main import app
from movie_tracker.models.user import User
from movie_tracker.services.tmdb_client import TMDBClient
from movie_tracker.services.tmdb_service import TMDBContext, TMDBService
from movie_tracker.utils.cache import CacheStore
from movie_tracker.utils.dependencies import get_tmdb_service
from movie_tracker.utils.security import create_access_token, hash_password

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Manually advanced time source for the cache"""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session: records calls and replays queued responses"""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []
        self.closed = False

    def queue(self, response):
        self.responses.append(response)

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return FakeResponse(200, {"page": 1, "results": [], "total_pages": 0, "total_results": 0})

    def close(self):
        self.closed = True


def build_service(token="real-token", session=None, clock=None, mock_provider=None):
    """TMDBService wired to a fake HTTP session and clock"""
    client = TMDBClient(token, session=session or FakeSession())
    cache = CacheStore(max_size=100, clock=clock or FakeClock())
    context = TMDBContext(client=client, cache=cache)
    if mock_provider is not None:
        context.mock_provider = mock_provider
    return TMDBService(context)


@pytest.fixture
def service_factory():
    return build_service


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def tmdb_service(fake_session, fake_clock):
    """Service without a usable credential: every call is answered from mock data"""
    return build_service(token="", session=fake_session, clock=fake_clock)


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session, tmdb_service):
    """FastAPI test client with the database and TMDB dependencies overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_tmdb_service, None)


def create_user(session, email="user@example.com", password="Password123!", name="Test User"):
    user = User(email=email, password_hash=hash_password(password), name=name)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    return create_user(db_session)


@pytest.fixture
def auth_headers(test_user):
    """Bearer header for test_user"""
    token = create_access_token(data={"user_id": test_user.id, "email": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def network_error():
    return requests.exceptions.ConnectionError("connection refused")


@pytest.fixture
def legacy_hash():
    """Builds password records in the pre-passlib "<hex key>.<salt>" scrypt format"""

    def make(password, salt="a1b2c3d4e5f60718"):
        derived = hashlib.scrypt(password.encode("utf-8"), salt=salt.encode("utf-8"), n=16384, r=8, p=1, dklen=64)
        return f"{binascii.hexlify(derived).decode()}.{salt}"

    return make
