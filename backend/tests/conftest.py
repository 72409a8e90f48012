"""
Test Configuration and Fixtures
================================
Shared fixtures for all tests
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator, Iterable, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Must be set before mobiya.config builds its settings
os.environ["API_SECRET_KEY"] = "test-public-key"
os.environ["EMPLOYEE_API_KEY"] = "test-employee-key"
os.environ["GROQ_API_KEY"] = ""
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from mobiya.main import app
from mobiya.config import settings
from mobiya.models.database import Base, get_db
from mobiya.services.admission_gate import AdmissionGate
from mobiya.services.orchestrator import orchestrator


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeProviderChain:
    """
    Stand-in for ProviderChain with fixed answers

    Flags any message containing one of `profane_words` and reports
    `language` for everything at least three characters long.
    """

    def __init__(self, profane_words: Iterable[str] = ("damn",), language: str = "en"):
        self.profane_words = [w.lower() for w in profane_words]
        self.language = language
        self.profanity_calls = 0

    async def contains_profanity(self, text: str) -> bool:
        self.profanity_calls += 1
        lowered = (text or "").lower()
        return any(word in lowered for word in self.profane_words)

    async def detect_language(self, text: str) -> str:
        if not text or len(text.strip()) < 3:
            return "und"
        return self.language

    def warm_up(self) -> None:
        pass


@pytest.fixture
def fake_chain() -> FakeProviderChain:
    return FakeProviderChain()


@pytest.fixture
def make_gate():
    """Factory for gates over a FakeProviderChain"""
    def _make(
        profane_words: Iterable[str] = ("damn",),
        language: str = "en",
        reject_unsupported_languages: bool = False,
        supported_languages: Optional[list] = None
    ) -> AdmissionGate:
        return AdmissionGate(
            FakeProviderChain(profane_words, language),
            reject_unsupported_languages=reject_unsupported_languages,
            supported_languages=supported_languages or ["en", "hi"]
        )
    return _make


@pytest_asyncio.fixture
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(
    test_db: AsyncSession,
    fake_chain: FakeProviderChain,
    monkeypatch
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden dependencies and fake providers"""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(orchestrator, "gate", AdmissionGate(fake_chain))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def api_headers() -> dict:
    """Headers with the public API key"""
    return {
        "X-API-Key": settings.api_secret_key,
        "Content-Type": "application/json"
    }


@pytest.fixture
def employee_headers() -> dict:
    """Headers with the employee API key"""
    return {
        "X-API-Key": settings.employee_api_key,
        "Content-Type": "application/json"
    }


@pytest.fixture
def sample_candidates() -> list:
    """Curated pairs used across matching tests"""
    return [
        {"question": "What services does Mobiloitte provide to its clients?", "answer": "Mobiloitte builds AI, blockchain and mobile solutions."},
        {"question": "Who is the founder of Mobiloitte?", "answer": "Mobiloitte was founded by Ravi Kant."},
    ]
