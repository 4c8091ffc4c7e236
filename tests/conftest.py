import os

# Must be set before the app (and its settings) are imported
os.environ["ENV"] = "testing"
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from datetime import timedelta
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from models.users import User
from services.auth_service import AuthService
from services.refresh_token_store import RefreshTokenStore
from services.token_blacklist import AccessTokenBlacklist
from services.token_codec import TokenCodec
from utils.deps import get_db, get_token_codec
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "TestPassword123"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that interacts with the app using the test database.
    The client is async (for FastAPI), but the DB session is sync.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def codec() -> TokenCodec:
    return get_token_codec()


@pytest.fixture
def auth_service(session, codec) -> AuthService:
    return AuthService(
        db=session,
        codec=codec,
        refresh_store=RefreshTokenStore(session, refresh_ttl=timedelta(days=30)),
        blacklist=AccessTokenBlacklist(session)
    )


def create_user(session, email="user@example.com", name="Test User", password=TEST_PASSWORD) -> User:
    """Helper to insert a user directly, bypassing the API."""
    user = User(name=name, email=email, hashed_password=get_password_hash(password))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(session) -> User:
    return create_user(session)


@pytest.fixture
def other_user(session) -> User:
    return create_user(session, email="other@example.com", name="Other User")


async def login(client, email="user@example.com", password=TEST_PASSWORD) -> dict:
    """Logs in through the API and returns the envelope's data."""
    response = await client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]
