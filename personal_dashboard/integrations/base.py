"""Base interface for remote data sources."""

from abc import ABC, abstractmethod

from personal_dashboard.models.github import ContributionDay, Credentials, RepositorySummary


class RemoteSource(ABC):
    """Fetches dashboard data from a remote service.

    Implementations issue exactly one request per call, never retry,
    and report every failure as a FetchError.
    """

    @abstractmethod
    async def fetch_repositories(self, credentials: Credentials) -> list[RepositorySummary]:
        """Fetch the most recently updated repositories.

        Raises:
            FetchError: If the request or decoding fails
        """
        pass

    @abstractmethod
    async def fetch_contributions(self, credentials: Credentials) -> list[ContributionDay]:
        """Fetch the contribution calendar as a flat list of days.

        Raises:
            FetchError: If the request or decoding fails
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass
