"""Data models."""

from personal_dashboard.models.database import Base, get_db_session, init_db
from personal_dashboard.models.github import (
    CacheRecord,
    ContributionDay,
    Credentials,
    DataKind,
    RepositorySummary,
)
from personal_dashboard.models.launcher import AppLauncher
from personal_dashboard.models.preference import Preference

__all__ = [
    "AppLauncher",
    "Base",
    "CacheRecord",
    "ContributionDay",
    "Credentials",
    "DataKind",
    "Preference",
    "RepositorySummary",
    "get_db_session",
    "init_db",
]
