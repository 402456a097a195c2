"""Service for managing the custom app launcher list."""

import logging

from pydantic import ValidationError

from personal_dashboard.exceptions import LauncherValidationError
from personal_dashboard.models.launcher import AppLauncher
from personal_dashboard.services.preference_service import PreferenceStore

logger = logging.getLogger(__name__)

LAUNCHERS_KEY = "customAppLaunchers"


class LauncherStore:
    """Ordered list of app launchers persisted in the preference store."""

    def __init__(self, preferences: PreferenceStore):
        self.preferences = preferences

    def get_launchers(self) -> list[AppLauncher]:
        """Return all launchers in display order.

        Entries that no longer validate are skipped.
        """
        launchers = []
        for entry in self.preferences.get(LAUNCHERS_KEY) or []:
            try:
                launchers.append(AppLauncher.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid launcher entry {entry!r}: {e}")
        return launchers

    def add(
        self,
        name: str,
        image_identifier: str,
        app_path: str | None = None,
        url_string: str | None = None,
    ) -> AppLauncher:
        """Append a launcher to the end of the list.

        Raises:
            LauncherValidationError: If the entry has no name or no target
        """
        try:
            launcher = AppLauncher(
                name=name,
                image_identifier=image_identifier,
                app_path=app_path,
                url_string=url_string,
            )
        except ValidationError as e:
            raise LauncherValidationError(f"Invalid launcher '{name}': {e}") from e

        launchers = self.get_launchers()
        launchers.append(launcher)
        self._save(launchers)
        logger.info(f"Added launcher '{launcher.name}' -> {launcher.target}")
        return launcher

    def remove(self, index: int) -> AppLauncher | None:
        """Remove the launcher at index. Out-of-range indexes are ignored."""
        launchers = self.get_launchers()
        if index < 0 or index >= len(launchers):
            return None

        removed = launchers.pop(index)
        self._save(launchers)
        logger.info(f"Removed launcher '{removed.name}'")
        return removed

    def _save(self, launchers: list[AppLauncher]) -> None:
        self.preferences.set(
            LAUNCHERS_KEY,
            [launcher.model_dump(by_alias=True, exclude_none=True) for launcher in launchers],
        )
