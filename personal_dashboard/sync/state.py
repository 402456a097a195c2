"""Observable dashboard state that front ends subscribe to."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from personal_dashboard.exceptions import FetchError
from personal_dashboard.models.github import ContributionDay, DataKind, RepositorySummary
from personal_dashboard.services.cache_service import CacheStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """Snapshot of everything the dashboard shows.

    Snapshots are never mutated; every change produces a new one.
    """

    repositories: tuple[RepositorySummary, ...] = ()
    contributions: tuple[ContributionDay, ...] = ()
    is_loading: bool = False
    last_error: FetchError | None = None

    @property
    def total_contributions(self) -> int:
        """Sum of contribution counts across the whole calendar."""
        return sum(day.count for day in self.contributions)


StateListener = Callable[[DashboardState], None]


class ObservableState:
    """Holds the current DashboardState and notifies subscribers on change."""

    def __init__(self, cache: CacheStore | None = None):
        """Initialize the state, seeded from cache when one is given.

        Args:
            cache: Cache to read the last known repositories and contributions from
        """
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        self._state = DashboardState()

        if cache is not None:
            self._state = self._seed_from_cache(cache)

    @staticmethod
    def _seed_from_cache(cache: CacheStore) -> DashboardState:
        repositories = cache.load(DataKind.REPOSITORIES)
        contributions = cache.load(DataKind.CONTRIBUTIONS)
        logger.debug(
            f"Seeded state from cache: repositories={'yes' if repositories else 'no'}, "
            f"contributions={'yes' if contributions else 'no'}"
        )
        return DashboardState(
            repositories=tuple(repositories.value) if repositories else (),
            contributions=tuple(contributions.value) if contributions else (),
        )

    @property
    def state(self) -> DashboardState:
        """Return the current snapshot."""
        with self._lock:
            return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register listener to be called with every new snapshot.

        Returns:
            A callable that removes the subscription
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> DashboardState:
        """Replace the given fields and notify subscribers if anything changed.

        Sequence fields are stored as tuples.
        """
        for name in ("repositories", "contributions"):
            if name in changes:
                changes[name] = tuple(changes[name])

        with self._lock:
            new_state = replace(self._state, **changes)
            if new_state == self._state:
                return self._state
            self._state = new_state
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}", exc_info=True)

        return new_state
