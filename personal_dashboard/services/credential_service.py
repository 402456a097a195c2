"""GitHub credential storage."""

from personal_dashboard.models.github import Credentials
from personal_dashboard.services.preference_service import PreferenceStore

USERNAME_KEY = "githubUsername"
TOKEN_KEY = "githubToken"


class CredentialStore:
    """Reads and writes the GitHub username and token as plain preferences."""

    def __init__(self, preferences: PreferenceStore):
        self.preferences = preferences

    def get(self) -> Credentials:
        """Return the stored credentials; missing values read as empty strings."""
        return Credentials(
            username=self.preferences.get(USERNAME_KEY) or "",
            token=self.preferences.get(TOKEN_KEY) or "",
        )

    def set(self, credentials: Credentials) -> Credentials:
        """Store credentials, trimming surrounding whitespace."""
        cleaned = Credentials(
            username=credentials.username.strip(),
            token=credentials.token.strip(),
        )
        self.preferences.set(USERNAME_KEY, cleaned.username)
        self.preferences.set(TOKEN_KEY, cleaned.token)
        return cleaned
