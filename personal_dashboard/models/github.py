"""GitHub data shown on the dashboard and its cache envelope."""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DataKind(str, enum.Enum):
    """Independently cached resources, each with its own time-to-live."""

    REPOSITORIES = "repositories"
    CONTRIBUTIONS = "contributions"


@dataclass(frozen=True)
class Credentials:
    """GitHub login and personal access token."""

    username: str = ""
    token: str = ""

    @property
    def is_complete(self) -> bool:
        """Both values are required before any fetch is attempted."""
        return bool(self.username) and bool(self.token)

    def __repr__(self) -> str:
        return f"<Credentials(username={self.username!r}, token={'***' if self.token else ''!r})>"


class RepositorySummary(BaseModel):
    """One entry of the recently updated repositories list.

    Validates both the REST payload (``html_url``) and the cached form (``url``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    full_name: str
    url: str = Field(validation_alias=AliasChoices("html_url", "url"))
    description: str | None = None
    language: str | None = None
    updated_at: str


class ContributionDay(BaseModel):
    """A single day of the contribution calendar."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    count: int = Field(ge=0, validation_alias=AliasChoices("contributionCount", "count"))
    color: str


@dataclass(frozen=True)
class CacheRecord:
    """Last known good value of a data kind and when it was fetched."""

    kind: DataKind
    value: list[Any]
    fetched_at: datetime
