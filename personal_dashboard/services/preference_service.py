"""Key/value preference storage shared by every dashboard feature."""

import json
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from personal_dashboard.models.database import get_db_session
from personal_dashboard.models.preference import Preference

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Persistent JSON values keyed by name.

    Several features share the same table, so callers only ever touch
    the keys they own.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None):
        """Initialize the store.

        Args:
            session_factory: Optional factory for database sessions
        """
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value stored under key, or default."""
        with get_db_session(self._session_factory) as db:
            row = db.get(Preference, key)
            raw = row.value if row is not None else None

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable preference '{key}'")
            return default

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        payload = json.dumps(value)
        with get_db_session(self._session_factory) as db:
            row = db.get(Preference, key)
            if row is None:
                db.add(Preference(key=key, value=payload))
            else:
                row.value = payload
        logger.debug(f"Saved preference '{key}' ({len(payload)} bytes)")

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""
        with get_db_session(self._session_factory) as db:
            row = db.get(Preference, key)
            if row is None:
                return False
            db.delete(row)
        logger.debug(f"Deleted preference '{key}'")
        return True

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally filtered by prefix."""
        with get_db_session(self._session_factory) as db:
            query = db.query(Preference.key)
            if prefix:
                query = query.filter(Preference.key.startswith(prefix))
            return sorted(row[0] for row in query.all())
