"""Derived views over the entry collection.

Everything here is recomputed from the entries on each call; nothing is
stored.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import StrEnum

from mindmate.models import JournalEntry

RECENT_ENTRY_LIMIT = 5


@dataclass
class DayMoods:
    """Mood tallies for one local calendar day."""

    day: date
    moods: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.moods.values())


@dataclass
class DashboardStats:
    """Numbers and highlights shown on the dashboard."""

    total_entries: int
    last_entry_date: date | None
    latest_reflection_prompt: str | None
    recent_entries: list[JournalEntry] = field(default_factory=list)


class MoodCategory(StrEnum):
    """Coarse mood buckets, each drawn in its own colour."""

    POSITIVE = "positive"
    SAD = "sad"
    ANXIOUS = "anxious"
    ANGRY = "angry"
    CALM = "calm"
    NEUTRAL = "neutral"

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]


_CATEGORY_COLORS: dict[MoodCategory, str] = {
    MoodCategory.POSITIVE: "green",
    MoodCategory.SAD: "blue",
    MoodCategory.ANXIOUS: "yellow",
    MoodCategory.ANGRY: "red",
    MoodCategory.CALM: "magenta",
    MoodCategory.NEUTRAL: "grey50",
}

# Checked in order; first keyword hit wins.
_MOOD_KEYWORDS: list[tuple[MoodCategory, tuple[str, ...]]] = [
    (MoodCategory.POSITIVE, ("happy", "joy", "excited", "grateful")),
    (MoodCategory.SAD, ("sad", "down", "depressed")),
    (MoodCategory.ANXIOUS, ("anxious", "stressed", "overwhelmed")),
    (MoodCategory.ANGRY, ("angry", "frustrated")),
    (MoodCategory.CALM, ("calm", "relaxed", "peaceful")),
]


def local_day(entry: JournalEntry) -> date:
    """Calendar date of an entry in the local timezone."""
    return entry.created_at.astimezone().date()


def mood_timeline(
    entries: list[JournalEntry],
    today: date | None = None,
    days: int = 7,
) -> list[DayMoods]:
    """Group entries from the trailing ``days`` calendar days by day and mood.

    The window includes ``today``. Days without entries are left out.
    Returned oldest day first.
    """
    today = today or datetime.now().astimezone().date()
    start = today - timedelta(days=days - 1)

    by_day: dict[date, Counter[str]] = {}
    for entry in entries:
        day = local_day(entry)
        if not start <= day <= today:
            continue
        by_day.setdefault(day, Counter())[entry.analysis.mood] += 1

    return [DayMoods(day=d, moods=dict(by_day[d])) for d in sorted(by_day)]


def dashboard_stats(entries: list[JournalEntry]) -> DashboardStats:
    """Summarize a newest-first collection for the dashboard."""
    if not entries:
        return DashboardStats(total_entries=0, last_entry_date=None, latest_reflection_prompt=None)
    latest = entries[0]
    return DashboardStats(
        total_entries=len(entries),
        last_entry_date=local_day(latest),
        latest_reflection_prompt=latest.analysis.reflection_prompt or None,
        recent_entries=list(entries[:RECENT_ENTRY_LIMIT]),
    )


def mood_category(mood: str) -> MoodCategory:
    """Bucket a free-text mood label by keyword."""
    lower = mood.lower()
    for category, keywords in _MOOD_KEYWORDS:
        if any(k in lower for k in keywords):
            return category
    return MoodCategory.NEUTRAL


def all_moods(entries: list[JournalEntry]) -> list[str]:
    """Distinct mood labels in first-seen order."""
    return list(dict.fromkeys(e.analysis.mood for e in entries))
