"""
Shared fixtures: in-memory database, pinned clock, scripted AI backends
and a DOCX template with placeholders.
"""
import io
import json
from datetime import date, datetime

import pytest
from docx import Document
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobfit.main import app
from jobfit.core.auth_dependency import get_db
from jobfit.core.clock import get_clock
from jobfit.core.config import ADMIN_COOKIE_NAME, SESSION_COOKIE_NAME
from jobfit.core.security import create_access_token, hash_password
from jobfit.db.base import Base
from jobfit.db.models.user import User, UserStatus, PlanType
from jobfit.llm.provider import LLMProvider, LLMProviderError, LLMResponse
from jobfit.llm.router import ModelCandidate, ModelFallbackClient, get_ai_client


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

FIXED_NOW = datetime(2026, 3, 10, 14, 30, 0)
TODAY = FIXED_NOW.date()
YESTERDAY = date(2026, 3, 9)

GOOD_ANSWER = {
    "matchScore": 82,
    "resumeSummary": "Backend engineer with six years of Python.",
    "missingKeywords": ["Kubernetes"],
    "insightsAndRecommendations": ["Quantify the migration project"],
    "replacements": {"summary_bullet_1": "Led the migration of billing to FastAPI"},
}


class ScriptedProvider(LLMProvider):
    """
    Provider that plays back a script keyed by model name.
    
    Each entry is either answer text or an exception instance to raise.
    """
    
    name = "scripted"
    
    def __init__(self, script):
        self.script = script
        self.calls = []
    
    def generate(self, prompt, model, timeout=None):
        self.calls.append({"model": model, "timeout": timeout, "prompt": prompt})
        outcome = self.script.get(model, LLMProviderError(f"HTTP 404: model {model} not found"))
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=model)


def make_ai_client(script, models=("model-a", "model-b", "model-c"), **kwargs):
    provider = ScriptedProvider(script)
    client = ModelFallbackClient(
        [ModelCandidate("scripted", m) for m in models],
        provider_factory=lambda name: provider,
        **kwargs,
    )
    return client, provider


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def ai():
    """Scripted AI client answering GOOD_ANSWER from the first model."""
    client, provider = make_ai_client({"model-a": json.dumps(GOOD_ANSWER)})
    client.provider = provider
    return client


@pytest.fixture
def client(db, ai):
    """TestClient wired to the test session, the pinned clock and the scripted AI."""
    def override_get_db():
        yield db
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    app.dependency_overrides[get_ai_client] = lambda: ai
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for users with explicit quota state."""
    counter = {"n": 0}
    
    def _make(
        email=None,
        name="Jane Doe",
        password="testpass123",
        plan=PlanType.FREE,
        has_full_access=True,
        credits_used=0,
        daily_resume_count=0,
        daily_resume_limit=70,
        last_resume_date=None,
        status=UserStatus.APPROVED,
    ):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            name=name,
            password_hash=hash_password(password) if password else None,
            status=status,
            plan=plan,
            has_full_access=has_full_access,
            credits_used=credits_used,
            daily_resume_count=daily_resume_count,
            daily_resume_limit=daily_resume_limit,
            last_resume_date=last_resume_date,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    
    return _make


def login_as(client: TestClient, user: User):
    client.cookies.set(SESSION_COOKIE_NAME, create_access_token({"sub": str(user.id)}))


def login_as_admin(client: TestClient):
    client.cookies.set(ADMIN_COOKIE_NAME, create_access_token({"sub": "admin", "role": "admin"}))


def build_docx(*paragraphs) -> bytes:
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def template_docx() -> bytes:
    return build_docx(
        "Jane Doe, Backend Engineer",
        "{{ summary_bullet_1 }}",
        "Experience: Acme Corp, 2019 to 2025",
    )
