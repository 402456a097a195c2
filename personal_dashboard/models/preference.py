"""Preference model: the shared key/value settings store."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from personal_dashboard.models.database import Base


class Preference(Base):
    """A single JSON-encoded setting.

    Credentials, cached GitHub data and the launcher list all live here
    under their own keys.
    """

    __tablename__ = "preferences"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Preference(key={self.key!r})>"
