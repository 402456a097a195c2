"""Durable cache of the last successfully fetched GitHub data."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from personal_dashboard.models.github import CacheRecord, ContributionDay, DataKind, RepositorySummary
from personal_dashboard.services.preference_service import PreferenceStore

logger = logging.getLogger(__name__)

# Key names follow the menu bar app; the stored value is a {value, fetched_at} envelope
CACHE_KEYS: dict[DataKind, str] = {
    DataKind.REPOSITORIES: "cachedRepositories",
    DataKind.CONTRIBUTIONS: "cachedContributions",
}

_ADAPTERS: dict[DataKind, TypeAdapter] = {
    DataKind.REPOSITORIES: TypeAdapter(list[RepositorySummary]),
    DataKind.CONTRIBUTIONS: TypeAdapter(list[ContributionDay]),
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_fetched_at(raw: Any) -> datetime:
    """Parse a stored ISO timestamp, rejecting ones without a timezone.

    Raises:
        TypeError: If raw is not a string
        ValueError: If raw is not ISO-8601 or has no UTC offset
    """
    fetched_at = datetime.fromisoformat(raw)
    if fetched_at.tzinfo is None or fetched_at.utcoffset() is None:
        raise ValueError(f"timestamp {raw!r} has no timezone")
    return fetched_at


class CacheStore:
    """Stores one CacheRecord per data kind in the preference store."""

    def __init__(
        self,
        preferences: PreferenceStore,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the cache.

        Args:
            preferences: Shared preference storage
            clock: Returns the current aware UTC time (injectable for tests)
        """
        self.preferences = preferences
        self._clock = clock or _utcnow

    def load(self, kind: DataKind) -> CacheRecord | None:
        """Return the cached record for kind, or None if absent or unreadable."""
        stored = self.preferences.get(CACHE_KEYS[kind])
        if stored is None:
            return None

        try:
            value = _ADAPTERS[kind].validate_python(stored["value"])
            fetched_at = _parse_fetched_at(stored["fetched_at"])
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Discarding unreadable {kind.value} cache: {e}")
            return None

        return CacheRecord(kind=kind, value=value, fetched_at=fetched_at)

    def fetched_at(self, kind: DataKind) -> datetime | None:
        """Return when kind was last saved, without decoding the value."""
        stored = self.preferences.get(CACHE_KEYS[kind])
        if not isinstance(stored, dict):
            return None

        try:
            return _parse_fetched_at(stored["fetched_at"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable {kind.value} cache timestamp: {e}")
            return None

    def save(self, kind: DataKind, value: list[Any]) -> CacheRecord:
        """Persist value for kind, stamped with the current time.

        The stored timestamp never moves backwards, even if the clock does.
        """
        fetched_at = self._clock()
        previous = self.fetched_at(kind)
        if previous is not None and previous > fetched_at:
            fetched_at = previous

        items = list(value)
        self.preferences.set(
            CACHE_KEYS[kind],
            {
                "value": _ADAPTERS[kind].dump_python(items, mode="json"),
                "fetched_at": fetched_at.isoformat(),
            },
        )
        logger.info(f"Cached {len(items)} {kind.value} (fetched at {fetched_at.isoformat()})")
        return CacheRecord(kind=kind, value=items, fetched_at=fetched_at)

    def clear(self, kind: DataKind | None = None) -> list[DataKind]:
        """Remove cached data for kind, or for every kind when None.

        Returns:
            The kinds whose cache entry actually existed
        """
        kinds = [kind] if kind is not None else list(DataKind)
        return [k for k in kinds if self.preferences.delete(CACHE_KEYS[k])]
