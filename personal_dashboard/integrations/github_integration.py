"""GitHub REST and GraphQL client for repositories and contributions."""

import json
import logging
import time
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from personal_dashboard.exceptions import DecodeError, FetchError, NetworkError, UnauthorizedError
from personal_dashboard.integrations.base import RemoteSource
from personal_dashboard.models.github import ContributionDay, Credentials, RepositorySummary
from personal_dashboard.utils.config import GitHubConfig

logger = logging.getLogger(__name__)

CONTRIBUTIONS_QUERY = """
{
  user(login: %s) {
    contributionsCollection {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
            color
          }
        }
      }
    }
  }
}
"""

_REPOSITORY_LIST = TypeAdapter(list[RepositorySummary])


class GitHubSource(RemoteSource):
    """Fetches repositories over REST and the contribution calendar over GraphQL.

    Uses a shared httpx.AsyncClient; every call carries its own timeout so an
    injected client (e.g. with a mock transport) behaves the same way.
    """

    def __init__(self, config: GitHubConfig, client: httpx.AsyncClient | None = None):
        """Initialize the GitHub source.

        Args:
            config: GitHub endpoint configuration
            client: Optional pre-built HTTP client
        """
        self.config = config
        self.timeout = config.request_timeout_seconds
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """HTTP client, created on first use so offline commands never open one."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/vnd.github+json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - cleanup resources."""
        await self.close()

    async def fetch_repositories(self, credentials: Credentials) -> list[RepositorySummary]:
        """Fetch the user's repositories sorted by last update.

        Raises:
            FetchError: If the request fails or the payload is not a repository list
        """
        url = f"{self.config.api_base_url}/users/{credentials.username}/repos"
        payload = await self._request(
            "GET",
            url,
            params={"sort": "updated", "per_page": self.config.repositories_per_page},
            headers={"Authorization": f"token {credentials.token}"},
        )

        if not isinstance(payload, list):
            raise DecodeError(f"Expected a list of repositories, got {type(payload).__name__}")

        try:
            repositories = _REPOSITORY_LIST.validate_python(payload)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode repositories: {e}") from e

        logger.debug(f"Fetched {len(repositories)} repositories for {credentials.username}")
        return repositories

    async def fetch_contributions(self, credentials: Credentials) -> list[ContributionDay]:
        """Fetch the contribution calendar (roughly the last year).

        Week and day entries missing a field are dropped; only a missing
        calendar fails the whole fetch.

        Raises:
            FetchError: If the request fails or the calendar is absent
        """
        query = CONTRIBUTIONS_QUERY % json.dumps(credentials.username)
        payload = await self._request(
            "POST",
            self.config.graphql_url,
            json={"query": query},
            headers={
                "Authorization": f"Bearer {credentials.token}",
                "Content-Type": "application/json",
            },
        )

        weeks = self._extract_weeks(payload)
        days = self._flatten_weeks(weeks)

        logger.debug(f"Fetched {len(days)} contribution days for {credentials.username}")
        return days

    def _extract_weeks(self, payload: Any) -> list[Any]:
        """Walk data.user.contributionsCollection.contributionCalendar.weeks.

        Raises:
            DecodeError: If any level is missing
        """
        node = payload
        for key in ("data", "user", "contributionsCollection", "contributionCalendar", "weeks"):
            if not isinstance(node, dict) or node.get(key) is None:
                errors = payload.get("errors") if isinstance(payload, dict) else None
                if errors:
                    messages = "; ".join(str(err.get("message", err)) for err in errors if isinstance(err, dict))
                    raise DecodeError(f"GraphQL query failed: {messages or errors}")
                raise DecodeError(f"Contribution response is missing '{key}'")
            node = node[key]

        if not isinstance(node, list):
            raise DecodeError(f"Expected 'weeks' to be a list, got {type(node).__name__}")
        return node

    def _flatten_weeks(self, weeks: list[Any]) -> list[ContributionDay]:
        """Flatten weeks into days, skipping malformed entries."""
        days: list[ContributionDay] = []
        skipped = 0

        for week in weeks:
            entries = week.get("contributionDays") if isinstance(week, dict) else None
            if not isinstance(entries, list):
                skipped += 1
                continue

            for entry in entries:
                try:
                    days.append(ContributionDay.model_validate(entry))
                except ValidationError:
                    skipped += 1

        if skipped:
            logger.debug(f"Skipped {skipped} malformed contribution entries")
        return days

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            NetworkError: On transport failure or timeout
            UnauthorizedError: On HTTP 401
            FetchError: On any other error status
            DecodeError: If the body is not JSON
        """
        started = time.monotonic()
        try:
            response = await self.client.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"{method} {url} timed out after {self.timeout}s") from e
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        duration = time.monotonic() - started
        logger.debug(f"{method} {url} -> {response.status_code} ({duration:.2f}s)")

        if response.status_code == 401:
            raise UnauthorizedError("GitHub rejected the access token", status_code=401)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e
