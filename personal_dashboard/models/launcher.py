"""Custom application launcher entries."""

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class AppLauncher(BaseModel):
    """A shortcut shown in the launcher grid.

    Stored with camelCase keys so the list stays readable by the menu bar app.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    image_identifier: str
    app_path: str | None = None
    url_string: str | None = None

    @model_validator(mode="after")
    def require_target(self) -> "AppLauncher":
        """A launcher must open either an application or a URL."""
        if not self.name.strip():
            raise ValueError("name must not be empty")
        if not self.app_path and not self.url_string:
            raise ValueError("either app_path or url_string is required")
        return self

    @property
    def target(self) -> str:
        """What the launcher opens."""
        return self.app_path or self.url_string or ""
