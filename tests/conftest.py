"""Pytest fixtures for Sindh tests."""
import itertools
import sys
from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sindh.matching.config import DEFAULT_SCORING_CONFIG
from sindh.persistence.models import Base, utcnow


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def scoring_config():
    """Built-in scoring configuration (same values as config/scoring.yaml)."""
    return DEFAULT_SCORING_CONFIG


# =============================================================================
# RECORD FACTORIES
# =============================================================================

_phones = itertools.count(9000000000)


def next_phone() -> str:
    """Unique valid phone number."""
    return f"+91{next(_phones)}"


@pytest.fixture
def worker_factory(test_db, scoring_config):
    """
    Factory fixture to register workers through ProfileService.

    Usage:
        ravi = worker_factory(name="Ravi", skills=["electrical"], experience=12)
    """
    from sindh.profiles.service import ProfileService

    service = ProfileService(test_db, scoring_config)

    def _create_worker(**overrides):
        data = {
            "name": "Test Worker",
            "age": 35,
            "phone": next_phone(),
            "skills": ["electrical"],
            "experience": 5,
            "languages": ["hindi"],
            "location": {"address": "Connaught Place, Delhi", "coordinates": [77.209, 28.6139]},
        }
        data.update(overrides)
        return service.register_worker(data)

    return _create_worker


@pytest.fixture
def employer(test_db):
    """A registered employer."""
    from sindh.profiles.service import ProfileService

    return ProfileService(test_db).register_employer(
        {
            "name": "Sunita Sharma",
            "phone": next_phone(),
            "email": "sunita@buildright.in",
            "company": {"name": "BuildRight Constructions"},
            "location": {"address": "Karol Bagh, Delhi", "coordinates": [77.19, 28.65]},
        }
    )


@pytest.fixture
def job_factory(test_db, employer):
    """
    Factory fixture to post jobs through JobService.

    Usage:
        job = job_factory(title="Electrician", required_skills=["electrical"])
    """
    from sindh.jobs.service import JobService

    service = JobService(test_db)

    def _create_job(**overrides):
        data = {
            "title": "Electrician needed",
            "description": "Wiring work for a two-storey house",
            "required_skills": ["electrical"],
            "required_experience": 1,
            "preferred_languages": [],
            "location": {"address": "Karol Bagh, Delhi", "coordinates": [77.19, 28.65]},
            "wage": {"amount": 800, "period": "daily"},
            "duration": "5 days",
            "start_date": utcnow() + timedelta(days=2),
        }
        data.update(overrides)
        return service.post_job(employer.id, data)

    return _create_job


# =============================================================================
# MOCK FIXTURES (For external services)
# =============================================================================


class RecordingDispatcher:
    """Stands in for NotificationDispatcher; keeps every event instead of sending SMS."""

    def __init__(self):
        self.sent: list[tuple[str, dict]] = []
        self.batches: list[tuple[str, int]] = []

    async def notify(self, event, payload):
        self.sent.append((event, dict(payload)))
        return True

    async def notify_many(self, event, payloads):
        self.batches.append((event, len(payloads)))
        for payload in payloads:
            await self.notify(event, payload)
        return len(payloads)

    def events(self, event):
        return [payload for name, payload in self.sent if name == event]


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def api_session_factory():
    """Session factory over one shared in-memory database (safe across threads)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(api_session_factory, dispatcher):
    """TestClient wired to an in-memory database and a recording dispatcher."""
    from fastapi.testclient import TestClient

    from sindh.api.app import create_app
    from sindh.api.dependencies import get_config, get_db
    from sindh.auth.rate_limit import RateLimiter

    app = create_app(
        dispatcher=dispatcher,
        otp_limiter=RateLimiter(max_requests=3, window_seconds=600),
    )

    def _get_db():
        session = api_session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_config] = lambda: DEFAULT_SCORING_CONFIG

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
