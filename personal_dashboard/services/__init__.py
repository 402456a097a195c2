"""Storage services."""

from personal_dashboard.services.cache_service import CACHE_KEYS, CacheStore
from personal_dashboard.services.credential_service import CredentialStore
from personal_dashboard.services.launcher_service import LauncherStore
from personal_dashboard.services.preference_service import PreferenceStore

__all__ = [
    "CACHE_KEYS",
    "CacheStore",
    "CredentialStore",
    "LauncherStore",
    "PreferenceStore",
]
