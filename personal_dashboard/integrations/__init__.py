"""Remote data sources."""

from personal_dashboard.integrations.base import RemoteSource
from personal_dashboard.integrations.github_integration import GitHubSource

__all__ = [
    "GitHubSource",
    "RemoteSource",
]
