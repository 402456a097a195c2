"""Refresh coordinator: read-through cache with independent TTLs.

Serves cached data immediately and decides, per data kind, whether a
background fetch is needed. Fetches for different kinds run concurrently;
a fetch for a kind that is already in flight is never started twice.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from personal_dashboard.exceptions import FetchError, FetchErrorKind
from personal_dashboard.integrations.base import RemoteSource
from personal_dashboard.models.github import Credentials, DataKind
from personal_dashboard.services.cache_service import CacheStore
from personal_dashboard.services.credential_service import CredentialStore
from personal_dashboard.sync.freshness import DEFAULT_TTLS, needs_refresh
from personal_dashboard.sync.state import ObservableState

logger = logging.getLogger(__name__)

# Each kind owns exactly one state field
STATE_FIELDS: dict[DataKind, str] = {
    DataKind.REPOSITORIES: "repositories",
    DataKind.CONTRIBUTIONS: "contributions",
}


class RefreshCoordinator:
    """Decides what to fetch, fetches it, and publishes the results.

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        source: RemoteSource,
        cache: CacheStore,
        credentials: CredentialStore,
        state: ObservableState,
        ttls: Mapping[DataKind, timedelta] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the coordinator.

        Args:
            source: Remote data source
            cache: Durable cache of fetched values
            credentials: Where the GitHub username and token are read from
            state: Observable state updated as fetches complete
            ttls: Per-kind time-to-live, defaults to DEFAULT_TTLS
            clock: Returns the current aware UTC time (injectable for tests)
        """
        self.source = source
        self.cache = cache
        self.credentials = credentials
        self.state = state
        self.ttls = dict(ttls or DEFAULT_TTLS)
        self._clock = clock or (lambda: datetime.now(UTC))

        self._in_flight: set[DataKind] = set()
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> frozenset[DataKind]:
        """Kinds with a fetch currently outstanding."""
        return frozenset(self._in_flight)

    def kinds_to_refresh(self, force_refresh: bool = False) -> list[DataKind]:
        """Return the kinds that are stale and not already being fetched."""
        now = self._clock()
        return [
            kind
            for kind in DataKind
            if kind not in self._in_flight
            and needs_refresh(kind, self.cache.fetched_at(kind), now, force_refresh, self.ttls)
        ]

    def refresh(self, force_refresh: bool = False) -> asyncio.Task | None:
        """Start a background refresh and return without waiting for it.

        Progress is published through the observable state. The returned
        task may be awaited but does not need to be.

        Args:
            force_refresh: Fetch every kind that is not already in flight,
                regardless of cache age

        Returns:
            The scheduled task, or None if nothing needed fetching
        """
        credentials = self.credentials.get()
        if not credentials.is_complete:
            logger.debug(f"Refresh {FetchErrorKind.SKIPPED.value}: GitHub username or token not configured")
            return None

        kinds = self.kinds_to_refresh(force_refresh)
        if not kinds:
            logger.debug("Refresh skipped: cached data is fresh or already being fetched")
            return None

        loop = asyncio.get_running_loop()

        # Claim the kinds before yielding to the loop so that a second
        # refresh() call cannot launch the same fetch.
        self._in_flight.update(kinds)
        self.state.update(is_loading=True, last_error=None)
        logger.info(
            f"Refreshing {', '.join(kind.value for kind in kinds)}"
            f"{' (forced)' if force_refresh else ''}"
        )

        task = loop.create_task(self._run_batch(credentials, kinds))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every outstanding refresh has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_batch(self, credentials: Credentials, kinds: list[DataKind]) -> None:
        """Fetch kinds concurrently, then persist the successes once all settle."""
        try:
            results = await asyncio.gather(*(self._fetch(kind, credentials) for kind in kinds))
            fetched = {kind: value for kind, value in zip(kinds, results) if value is not None}
            self._persist(fetched)
        finally:
            self._in_flight.difference_update(kinds)
            self.state.update(is_loading=bool(self._in_flight))

    async def _fetch(self, kind: DataKind, credentials: Credentials) -> list[Any] | None:
        """Fetch one kind and publish it. Returns None on failure."""
        try:
            if kind is DataKind.REPOSITORIES:
                value = await self.source.fetch_repositories(credentials)
            else:
                value = await self.source.fetch_contributions(credentials)
        except FetchError as e:
            # Keep showing the stale data
            logger.warning(f"Failed to refresh {kind.value} ({e.kind.value}): {e}")
            self.state.update(last_error=e)
            return None
        except Exception as e:
            logger.error(f"Unexpected error refreshing {kind.value}: {e}", exc_info=True)
            self.state.update(last_error=FetchError(f"Unexpected error refreshing {kind.value}: {e}"))
            return None

        self.state.update(**{STATE_FIELDS[kind]: value})
        logger.debug(f"Refreshed {kind.value}: {len(value)} items")
        return value

    def _persist(self, fetched: dict[DataKind, list[Any]]) -> None:
        for kind, value in fetched.items():
            try:
                self.cache.save(kind, value)
            except SQLAlchemyError as e:
                logger.error(f"Failed to cache {kind.value}: {e}", exc_info=True)
