import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import models  # noqa: E402,F401
from app.core.cache import catalog_cache  # noqa: E402
from app.core.locks import SessionLockRegistry  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.repositories.interview_session_repository import InterviewSessionRepository  # noqa: E402
from app.repositories.question_repository import QuestionRepository  # noqa: E402
from app.repositories.user_repository import UserRepository  # noqa: E402
from app.services.interview_service import InterviewService  # noqa: E402
from tests.fakes import TWO_QUESTIONS, FakeClock, FakeFeedbackProvider  # noqa: E402


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    catalog_cache.clear()
    yield
    catalog_cache.clear()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def questions(db):
    repo = QuestionRepository(db)
    repo.seed(TWO_QUESTIONS)
    return repo.list_all()


@pytest.fixture
def user(db):
    repo = UserRepository(db)
    user = repo.get_or_create("firebase-uid-1", name="Ada", email="ada@example.com")
    return repo.update_profile(user, job_role="Backend Developer")


@pytest.fixture
def other_user(db):
    repo = UserRepository(db)
    user = repo.get_or_create("firebase-uid-2", name="Grace", email="grace@example.com")
    return repo.update_profile(user, job_role="Frontend Developer")


@pytest.fixture
def provider():
    return FakeFeedbackProvider()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(db, provider, clock):
    return InterviewService(
        questions=QuestionRepository(db),
        sessions=InterviewSessionRepository(db),
        users=UserRepository(db),
        feedback_provider=provider,
        locks=SessionLockRegistry(),
        clock=clock,
    )
