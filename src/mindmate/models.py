"""Journal domain models (pydantic v2).

Field names on the wire (the analysis endpoint and the stored snapshot)
are camelCase; Python code uses the snake_case attributes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class View(StrEnum):
    """Which screen the app is showing."""

    DASHBOARD = "dashboard"
    EDITOR = "editor"
    INSIGHTS = "insights"


class CognitiveDistortion(BaseModel):
    """One thought pattern flagged in an entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    explanation: str = ""
    example: str = ""  # quote from the entry text, not verified

    @field_validator("explanation", "example", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value


class Analysis(BaseModel):
    """Structured AI feedback about a single entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mood: str
    summary: str
    tip: str
    reflection_prompt: str = Field(alias="reflectionPrompt")
    cognitive_distortions: list[CognitiveDistortion] = Field(
        default_factory=list, alias="cognitiveDistortions"
    )


class JournalEntry(BaseModel):
    """A saved entry: the user's text plus its analysis.

    ``id`` and ``date`` are both the creation instant as an ISO-8601 string,
    so two entries created in the same millisecond share an id.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    text: str
    analysis: Analysis

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @property
    def created_at(self) -> datetime:
        """The entry date as an aware datetime."""
        return parse_timestamp(self.date)


def iso_timestamp(now: datetime | None = None) -> str:
    """Format an instant as UTC ISO-8601 with millisecond precision and a Z suffix."""
    now = now or datetime.now(tz=UTC)
    if now.tzinfo is None:
        now = now.astimezone()
    stamp = now.astimezone(UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as local time."""
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def new_entry(text: str, analysis: Analysis, now: datetime | None = None) -> JournalEntry:
    """Build an entry stamped with the current instant."""
    stamp = iso_timestamp(now)
    return JournalEntry(id=stamp, date=stamp, text=text, analysis=analysis)
