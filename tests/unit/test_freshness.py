"""Tests for the freshness policy."""

from datetime import UTC, datetime, timedelta

import pytest

from personal_dashboard.models.github import DataKind
from personal_dashboard.sync.freshness import DEFAULT_TTLS, needs_refresh

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def test_default_ttls():
    """Repositories expire after 30 minutes, contributions after 6 hours."""
    assert DEFAULT_TTLS[DataKind.REPOSITORIES] == timedelta(minutes=30)
    assert DEFAULT_TTLS[DataKind.CONTRIBUTIONS] == timedelta(hours=6)


@pytest.mark.parametrize("kind", list(DataKind))
def test_never_fetched_needs_refresh(kind):
    """Missing timestamp always triggers a fetch."""
    assert needs_refresh(kind, None, NOW) is True


@pytest.mark.parametrize("kind", list(DataKind))
@pytest.mark.parametrize("age", [timedelta(0), timedelta(days=365), timedelta(seconds=-30)])
def test_force_refresh_always_true(kind, age):
    """Forcing ignores cache age, even for timestamps in the future."""
    assert needs_refresh(kind, NOW - age, NOW, force_refresh=True) is True


@pytest.mark.parametrize(
    "kind,age,expected",
    [
        (DataKind.REPOSITORIES, timedelta(minutes=29, seconds=59), False),
        (DataKind.REPOSITORIES, timedelta(minutes=30), False),
        (DataKind.REPOSITORIES, timedelta(minutes=30, microseconds=1), True),
        (DataKind.CONTRIBUTIONS, timedelta(minutes=31), False),
        (DataKind.CONTRIBUTIONS, timedelta(hours=6), False),
        (DataKind.CONTRIBUTIONS, timedelta(hours=6, seconds=1), True),
    ],
)
def test_stale_only_after_ttl(kind, age, expected):
    """Data is stale strictly after its TTL has elapsed."""
    assert needs_refresh(kind, NOW - age, NOW) is expected


def test_ttls_are_independent():
    """A 45 minute old cache is stale for repositories but fresh for contributions."""
    fetched_at = NOW - timedelta(minutes=45)

    assert needs_refresh(DataKind.REPOSITORIES, fetched_at, NOW) is True
    assert needs_refresh(DataKind.CONTRIBUTIONS, fetched_at, NOW) is False


def test_custom_ttls():
    """TTLs can be overridden per kind."""
    ttls = {
        DataKind.REPOSITORIES: timedelta(minutes=5),
        DataKind.CONTRIBUTIONS: timedelta(days=1),
    }
    fetched_at = NOW - timedelta(minutes=10)

    assert needs_refresh(DataKind.REPOSITORIES, fetched_at, NOW, ttls=ttls) is True
    assert needs_refresh(DataKind.CONTRIBUTIONS, NOW - timedelta(hours=12), NOW, ttls=ttls) is False
