"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client with database and AI overrides
- A scripted interview assistant (no network)
- Captured Celery queueing
- Admin/candidate users and auth headers
"""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.deps import get_extraction_orchestrator, get_interview_assistant
from app.core.exceptions import UpstreamProviderError
from app.core.security import create_access_token, get_password_hash
from app.models.candidate import Candidate
from app.models.user import User, UserRole
from app.schemas.interview import InterviewSummary
from app.services.interview_ai import AnswerEvaluation, InterviewAssistant
from app.services.resume_extraction import ExtractionOrchestrator, RegexExtractionStrategy
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class ScriptedAssistant(InterviewAssistant):
    """
    InterviewAssistant that never touches the network.

    Scores are popped from `scores` (default 7); each collaborator can be
    switched to fail with UpstreamProviderError.
    """

    def __init__(self):
        super().__init__(client=None, question_count=5, technical_count=4)
        self.scores: List[float] = []
        self.fail_questions = False
        self.fail_scoring = False
        self.fail_summary = False
        self.summary_calls = 0
        self.last_skillset: Optional[List[str]] = None

    def generate_questions(self, job_role, resume_text="", skillset=None):
        self.last_skillset = skillset
        if self.fail_questions:
            raise UpstreamProviderError("question provider down")
        return [f"{job_role} question {i + 1}" for i in range(self.question_count)]

    def evaluate_answer(self, question, answer, job_role):
        if self.fail_scoring:
            raise UpstreamProviderError("scoring provider down")
        score = self.scores.pop(0) if self.scores else 7
        return AnswerEvaluation(score=score, feedback=f"Feedback on {question}")

    def summarize(self, job_role, answered):
        self.summary_calls += 1
        if self.fail_summary:
            raise UpstreamProviderError("summary provider down")
        return InterviewSummary(
            strengths=["Clear explanations"],
            improvement_areas=["System design depth"],
            recommendation="Recommended for the next round",
        )


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def assistant():
    return ScriptedAssistant()


@pytest.fixture
def queued_tasks(monkeypatch):
    """
    Capture Celery queueing instead of talking to Redis.
    Each entry is (task name, kwargs).
    """
    calls = []

    def fake_queue(task, *args, **kwargs):
        calls.append((task.name, kwargs))
        return True

    monkeypatch.setattr("app.api.endpoints.admin.queue_task_safely", fake_queue)
    monkeypatch.setattr("app.api.endpoints.auth.queue_task_safely", fake_queue)
    return calls


@pytest.fixture
def client(db_session, assistant, queued_tasks):
    """
    FastAPI test client with overridden database and AI dependencies.
    Resume extraction runs the regex strategy only.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_interview_assistant] = lambda: assistant
    app.dependency_overrides[get_extraction_orchestrator] = lambda: ExtractionOrchestrator([RegexExtractionStrategy()])

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def create_user(db, email: str, password: str = "SecurePass123!", role: UserRole = UserRole.CANDIDATE) -> User:
    user = User(email=email, hashed_password=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_candidate(db, email: str = "jane@corp.io", job_role: str = "Backend Engineer", **kwargs) -> Candidate:
    candidate = Candidate(
        email=email,
        job_role=job_role,
        name=kwargs.pop("name", "Jane Roe"),
        phone=kwargs.pop("phone", "+1 415 867 5309"),
        resume_text=kwargs.pop("resume_text", "Jane Roe\nBackend Engineer\nSkills: Python, PostgreSQL"),
        **kwargs
    )
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return candidate


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    return create_user(db_session, "admin@corp.io", role=UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def make_user(db_session):
    def _make(email: str, password: str = "SecurePass123!", role: UserRole = UserRole.CANDIDATE) -> User:
        return create_user(db_session, email, password, role)
    return _make


@pytest.fixture
def make_candidate(db_session):
    def _make(email: str = "jane@corp.io", **kwargs) -> Candidate:
        return create_candidate(db_session, email, **kwargs)
    return _make


@pytest.fixture
def headers_for():
    return auth_headers
