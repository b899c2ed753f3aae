"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For in-memory collaborators, see tests/mocks/matching_mocks.py
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.access.control import AccessControlGate
from core.access.subscription import InMemorySubscriptionStore
from core.matcher.service import MatchEngine
from core.scorer.service import ScoringService
from database.models import Base
from tests.mocks.matching_mocks import (
    InMemoryApplicationReader, InMemoryCandidateReader, InMemoryJobReader
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine shared across threads, with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(sqlite_engine):
    Session = sessionmaker(bind=sqlite_engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def rule_based_engine():
    """MatchEngine with only the rule-based strategy and the default threshold."""
    return MatchEngine(ScoringService.build(ai_enabled=False))


@pytest.fixture
def subscriptions():
    return InMemorySubscriptionStore()


@pytest.fixture
def access_gate(subscriptions):
    return AccessControlGate(subscriptions)


@pytest.fixture
def candidate_reader():
    return InMemoryCandidateReader()


@pytest.fixture
def job_reader():
    return InMemoryJobReader()


@pytest.fixture
def application_reader():
    return InMemoryApplicationReader()
