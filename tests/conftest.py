"""
Pytest Configuration and Fixtures.

Shared fixtures: a controllable clock, sequential IDs, a LearningService
wired to both, a small chapter catalog and an in-memory SQLite database.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import study_core.models  # noqa: E402,F401
from study_core.database import Base  # noqa: E402
from study_core.schemas import ChapterSchema  # noqa: E402
from study_core.service import LearningService  # noqa: E402

START_TIME = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequentialIds:
    """ID factory producing review_1, session_2, ..."""

    def __init__(self):
        self.counter = 0

    def __call__(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}_{self.counter}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_factory():
    return SequentialIds()


@pytest.fixture
def service(clock, id_factory):
    return LearningService(clock=clock, id_factory=id_factory)


@pytest.fixture
def chapters():
    return [
        ChapterSchema(id="ch-1", title="Sorting Algorithms"),
        ChapterSchema(id="ch-2", title="Graph Traversal"),
        ChapterSchema(id="ch-3", title="Dynamic Programming"),
    ]


@pytest.fixture
def session_factory():
    """sessionmaker bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def answer(service, question_id, chapter_id, correct, response_time=10000, bloom_level=1, times=1):
    """Record the same outcome for a question several times."""
    pattern = None
    for _ in range(times):
        pattern = service.record_question_attempt({
            "question_id": question_id,
            "chapter_id": chapter_id,
            "correct": correct,
            "response_time": response_time,
            "bloom_level": bloom_level,
        })
    return pattern
