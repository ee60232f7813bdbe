"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path
from typing import List, Optional

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are cached on first use, so the test environment must be in place before any import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-vocalis"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["COOKIE_SECURE"] = "false"
os.environ["COMMAND_MIN_INTERVAL_MS"] = "0"
os.environ.pop("GEMINI_API_URL", None)
os.environ.pop("GEMINI_API_KEY", None)

import pytest
from sqlalchemy.orm import Session, sessionmaker

from vocalis.components.throttle import CommandThrottle
from vocalis.core.database import create_db_engine, get_db, init_db
from vocalis.core.gemini_client import ReasoningResult
from vocalis.services.token_service import TokenService, get_token_service


class FakeReasoningClient:
    """Stands in for GeminiClient; replies from a queue and records prompts"""

    def __init__(self, replies: Optional[List] = None):
        self.replies = list(replies or [])
        self.prompts: List[str] = []

    def queue(self, reply) -> "FakeReasoningClient":
        self.replies.append(reply)
        return self

    async def generate(self, prompt: str) -> ReasoningResult:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else ReasoningResult.unavailable()
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ReasoningResult):
            return reply
        return ReasoningResult(text=reply)

    async def close(self):
        pass


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a fresh in-memory database session for testing"""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def token_service() -> TokenService:
    """Token service sharing the secret used by the API"""
    return get_token_service()


@pytest.fixture
def reasoning_client() -> FakeReasoningClient:
    return FakeReasoningClient()


@pytest.fixture
def command_throttle() -> CommandThrottle:
    """Throttle that admits everything; tests needing a gate build their own"""
    return CommandThrottle(min_interval_ms=0)


@pytest.fixture(scope="function")
def client(db: Session, reasoning_client: FakeReasoningClient, command_throttle: CommandThrottle):
    """Create test client with database and reasoning client overrides"""
    from fastapi.testclient import TestClient

    from vocalis.main import create_app

    app = create_app(
        reasoning_client=reasoning_client,
        command_throttle=command_throttle,
        create_tables=False,
    )

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signed_up(client) -> dict:
    """Register a user through the API; returns the response body plus its token"""
    response = client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": "ada@example.com", "password": "correct horse"},
    )
    assert response.status_code == 201
    body = response.json()
    body["token"] = response.cookies.get("token")
    return body
