"""Builds and owns the dashboard components."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from personal_dashboard.integrations.base import RemoteSource
from personal_dashboard.integrations.github_integration import GitHubSource
from personal_dashboard.models.database import get_session_factory
from personal_dashboard.models.github import Credentials
from personal_dashboard.services.cache_service import CacheStore
from personal_dashboard.services.credential_service import CredentialStore
from personal_dashboard.services.launcher_service import LauncherStore
from personal_dashboard.services.preference_service import PreferenceStore
from personal_dashboard.sync.coordinator import RefreshCoordinator
from personal_dashboard.sync.state import ObservableState
from personal_dashboard.utils.config import Config

logger = logging.getLogger(__name__)


class Dashboard:
    """One fully wired dashboard.

    Front ends receive this object explicitly; there is no global instance.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        cache: CacheStore,
        credentials: CredentialStore,
        launchers: LauncherStore,
        state: ObservableState,
        source: RemoteSource,
        coordinator: RefreshCoordinator,
    ):
        self.preferences = preferences
        self.cache = cache
        self.credentials = credentials
        self.launchers = launchers
        self.state = state
        self.source = source
        self.coordinator = coordinator

    @classmethod
    def create(
        cls,
        config: Config,
        session_factory: Callable[[], Session] | None = None,
        source: RemoteSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "Dashboard":
        """Wire up a dashboard from configuration.

        The state is seeded from the cache before any network call is made.

        Args:
            config: Application configuration
            session_factory: Optional factory for database sessions
            source: Optional remote source, defaults to GitHubSource
            clock: Optional clock shared by the cache and coordinator
        """
        preferences = PreferenceStore(session_factory or get_session_factory(config))
        cache = CacheStore(preferences, clock=clock)
        credentials = CredentialStore(preferences)
        state = ObservableState(cache)
        source = source or GitHubSource(config.github)
        coordinator = RefreshCoordinator(
            source=source,
            cache=cache,
            credentials=credentials,
            state=state,
            ttls=config.cache.ttls(),
            clock=clock,
        )
        return cls(
            preferences=preferences,
            cache=cache,
            credentials=credentials,
            launchers=LauncherStore(preferences),
            state=state,
            source=source,
            coordinator=coordinator,
        )

    def save_settings(self, credentials: Credentials) -> asyncio.Task | None:
        """Store new credentials and force a full refresh with them."""
        saved = self.credentials.set(credentials)
        logger.info(f"Saved GitHub settings for {saved.username or '<unset>'}")
        return self.coordinator.refresh(force_refresh=True)

    async def close(self) -> None:
        """Wait for outstanding refreshes and release the HTTP client."""
        await self.coordinator.wait_idle()
        await self.source.close()
