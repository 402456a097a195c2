"""Pytest configuration and fixtures."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from personal_dashboard.integrations.base import RemoteSource
from personal_dashboard.models.database import Base, reset_engine
from personal_dashboard.models.github import ContributionDay, Credentials, DataKind, RepositorySummary
from personal_dashboard.services.cache_service import CacheStore
from personal_dashboard.services.credential_service import CredentialStore
from personal_dashboard.services.preference_service import PreferenceStore
from personal_dashboard.utils.config import Config, reset_config


class FakeClock:
    """Controllable replacement for datetime.now(UTC)."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 10, 19, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeSource(RemoteSource):
    """In-memory RemoteSource that counts calls and can be held open."""

    def __init__(self, repositories=None, contributions=None):
        self.repositories = list(repositories or [])
        self.contributions = list(contributions or [])
        self.repository_error: Exception | None = None
        self.contribution_error: Exception | None = None
        self.repository_gate: asyncio.Event | None = None
        self.contribution_gate: asyncio.Event | None = None
        self.calls = {DataKind.REPOSITORIES: 0, DataKind.CONTRIBUTIONS: 0}
        self.closed = False

    async def fetch_repositories(self, credentials):
        self.calls[DataKind.REPOSITORIES] += 1
        if self.repository_gate is not None:
            await self.repository_gate.wait()
        if self.repository_error is not None:
            raise self.repository_error
        return list(self.repositories)

    async def fetch_contributions(self, credentials):
        self.calls[DataKind.CONTRIBUTIONS] += 1
        if self.contribution_gate is not None:
            await self.contribution_gate.wait()
        if self.contribution_error is not None:
            raise self.contribution_error
        return list(self.contributions)

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep the lazily created config and engine from leaking between tests."""
    reset_config()
    reset_engine()
    yield
    reset_config()
    reset_engine()


@pytest.fixture(scope="function")
def test_config():
    """Create a test configuration."""
    return Config(database={"url": "sqlite:///:memory:", "echo": False})


@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool to ensure the same connection is used throughout,
    which is required for in-memory SQLite databases.
    """
    # Import models to ensure they're registered with Base
    from personal_dashboard.models import preference  # noqa: F401

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine):
    """Session factory bound to the in-memory engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)


@pytest.fixture
def preferences(session_factory):
    """Preference store backed by the in-memory database."""
    return PreferenceStore(session_factory)


@pytest.fixture
def clock():
    """A fixed clock that tests can advance."""
    return FakeClock()


@pytest.fixture
def cache(preferences, clock):
    """Cache store using the fake clock."""
    return CacheStore(preferences, clock=clock)


@pytest.fixture
def credential_store(preferences):
    """Credential store with a configured GitHub user."""
    store = CredentialStore(preferences)
    store.set(Credentials(username="octocat", token="ghp_test"))
    return store


@pytest.fixture
def sample_repositories():
    """Repositories as returned by the REST API, decoded."""
    return [
        RepositorySummary(
            id=1296269,
            name="hello-world",
            full_name="octocat/hello-world",
            html_url="https://github.com/octocat/hello-world",
            description="My first repository",
            language="Python",
            updated_at="2026-10-18T16:20:00Z",
        ),
        RepositorySummary(
            id=1300192,
            name="spoon-knife",
            full_name="octocat/spoon-knife",
            html_url="https://github.com/octocat/spoon-knife",
            description=None,
            language=None,
            updated_at="2026-10-01T08:00:00Z",
        ),
    ]


@pytest.fixture
def sample_contributions():
    """A few days of a contribution calendar."""
    return [
        ContributionDay(date="2026-10-16", count=0, color="#ebedf0"),
        ContributionDay(date="2026-10-17", count=4, color="#40c463"),
        ContributionDay(date="2026-10-18", count=9, color="#216e39"),
    ]


@pytest.fixture
def fake_source(sample_repositories, sample_contributions):
    """Remote source returning the sample data."""
    return FakeSource(sample_repositories, sample_contributions)


@pytest.fixture
def repos_payload():
    """Raw REST response for /users/{username}/repos."""
    return [
        {
            "id": 1296269,
            "name": "hello-world",
            "full_name": "octocat/hello-world",
            "html_url": "https://github.com/octocat/hello-world",
            "description": "My first repository",
            "language": "Python",
            "updated_at": "2026-10-18T16:20:00Z",
            "stargazers_count": 80,
        },
        {
            "id": 1300192,
            "name": "spoon-knife",
            "full_name": "octocat/spoon-knife",
            "html_url": "https://github.com/octocat/spoon-knife",
            "description": None,
            "language": None,
            "updated_at": "2026-10-01T08:00:00Z",
        },
    ]


@pytest.fixture
def contributions_payload():
    """Raw GraphQL response for the contribution calendar."""
    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "weeks": [
                            {
                                "contributionDays": [
                                    {"date": "2026-10-11", "contributionCount": 0, "color": "#ebedf0"},
                                    {"date": "2026-10-12", "contributionCount": 2, "color": "#9be9a8"},
                                ]
                            },
                            {
                                "contributionDays": [
                                    {"date": "2026-10-18", "contributionCount": 9, "color": "#216e39"},
                                ]
                            },
                        ]
                    }
                }
            }
        }
    }
