"""Decides whether cached data is still fresh enough to show."""

from collections.abc import Mapping
from datetime import datetime, timedelta

from personal_dashboard.models.github import DataKind

# The repository list changes far more often than the yearly calendar
DEFAULT_TTLS: dict[DataKind, timedelta] = {
    DataKind.REPOSITORIES: timedelta(minutes=30),
    DataKind.CONTRIBUTIONS: timedelta(hours=6),
}


def needs_refresh(
    kind: DataKind,
    last_fetched_at: datetime | None,
    now: datetime,
    force_refresh: bool = False,
    ttls: Mapping[DataKind, timedelta] | None = None,
) -> bool:
    """Return True if kind should be fetched again.

    Args:
        kind: Data kind being checked
        last_fetched_at: When the cached value was fetched, if there is one
        now: Current time
        force_refresh: Ignore the cache age entirely
        ttls: Per-kind time-to-live, defaults to DEFAULT_TTLS
    """
    if force_refresh or last_fetched_at is None:
        return True

    ttl = (ttls or DEFAULT_TTLS)[kind]
    return now > last_fetched_at + ttl
