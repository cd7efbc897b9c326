"""Day-level indexing of journal entries.

Entry timestamps are ISO-8601 strings. Each one is reduced to a local
calendar day; entries whose timestamp cannot be parsed belong to no day.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime, tzinfo

from pydantic import BaseModel, Field

from dreamlog.models import DreamEntry

DayKey = Callable[[datetime], date]


def parse_entry_date(value: object) -> datetime | None:
    """Parse an entry timestamp, returning None when it is unusable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of ``moment`` in local time (or in ``tz``).

    Naive datetimes are already local and are only truncated.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def entry_day(entry: DreamEntry, day_key: DayKey = local_day) -> date | None:
    """Calendar day of an entry, or None when its timestamp is unusable."""
    parsed = parse_entry_date(entry.date)
    if parsed is None:
        return None
    try:
        return day_key(parsed)
    except (OverflowError, ValueError):
        # offsets can push year 1 or 9999 outside the representable range
        return None


class DayIndex(BaseModel):
    """Entries grouped by calendar day."""

    by_day: dict[date, list[DreamEntry]] = Field(default_factory=dict)
    days: list[date] = Field(default_factory=list)

    def has_entry(self, day: date) -> bool:
        return day in self.by_day

    def entries_on(self, day: date) -> list[DreamEntry]:
        return list(self.by_day.get(day, []))

    @property
    def latest_day(self) -> date | None:
        return self.days[0] if self.days else None


def build_day_index(
    entries: Iterable[DreamEntry],
    day_key: DayKey = local_day,
) -> DayIndex:
    """Group entries by day, newest day first.

    Args:
        entries: Entries in any order.
        day_key: Maps a parsed timestamp to its calendar day.

    Returns:
        DayIndex whose ``by_day`` keeps collection order within each day
        and whose ``days`` lists the distinct days in descending order.
    """
    by_day: dict[date, list[DreamEntry]] = {}
    for entry in entries:
        day = entry_day(entry, day_key)
        if day is None:
            continue
        by_day.setdefault(day, []).append(entry)
    return DayIndex(by_day=by_day, days=sorted(by_day, reverse=True))
