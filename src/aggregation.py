"""Frequency tables over journal entries.

Mood distribution, theme frequency (per category and overall), calendar
buckets by month and ISO week, and the derived lucidity / monthly-average
scalars. Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import calendar
import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel, Field

from dreamlog.models import DreamEntry
from dreamlog.temporal import DayKey, entry_day, local_day

CATEGORY_THEME_LIMIT = 12
THEME_LIMIT = 8
BUCKET_MONTHS = 6
BUCKET_WEEKS = 6


class TimeRange(StrEnum):
    """Analytics filters offered to the reader."""

    ALL_TIME = "all-time"
    LAST_MONTH = "last-month"
    LAST_WEEK = "last-week"


_RANGE_DAYS = {TimeRange.LAST_MONTH: 30, TimeRange.LAST_WEEK: 7}


class MoodSlice(BaseModel):
    mood: str
    count: int
    percentage: int


class MoodDistribution(BaseModel):
    """Entry counts per mood, in first-encountered order."""

    slices: list[MoodSlice] = Field(default_factory=list)
    most_common: str | None = None

    def as_dict(self) -> dict[str, int]:
        return {s.mood: s.count for s in self.slices}


class ThemeCount(BaseModel):
    term: str
    count: int


class TimeBucket(BaseModel):
    """Entries falling in ``[start, end]`` (both inclusive)."""

    label: str
    start: date
    end: date
    count: int = 0


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def mood_distribution(entries: Iterable[DreamEntry]) -> MoodDistribution:
    """Count entries per mood and compute each mood's share.

    Shares are rounded independently and may not sum to exactly 100.
    Ties for the most common mood go to the mood seen first.
    """
    counts: Counter[str] = Counter(entry.mood for entry in entries)
    total = sum(counts.values())
    slices = [
        MoodSlice(mood=mood, count=count, percentage=percentage(count, total))
        for mood, count in counts.items()
    ]

    most_common: str | None = None
    best = 0
    for s in slices:
        if s.count > best:
            most_common, best = s.mood, s.count
    return MoodDistribution(slices=slices, most_common=most_common)


def _rank(counts: Mapping[str, int], labels: Mapping[str, str], limit: int) -> list[ThemeCount]:
    # sorted() is stable, so equal counts keep insertion order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [ThemeCount(term=labels[key], count=count) for key, count in ranked[:limit]]


def category_theme_frequency(
    entries: Iterable[DreamEntry],
    category: str,
    categories: Mapping[str, Sequence[str]],
    limit: int = CATEGORY_THEME_LIMIT,
) -> list[ThemeCount]:
    """Most frequent themes belonging to one category.

    Matching is case-insensitive and every occurrence counts, including a
    theme repeated within one entry. Themes outside the category are
    ignored; an unknown category yields an empty list. Terms are reported
    with the category's spelling, ordered by count with ties kept in
    category order.
    """
    known = categories.get(category)
    if not known:
        return []

    labels: dict[str, str] = {}
    for tag in known:
        labels.setdefault(tag.lower(), tag)

    mentions: Counter[str] = Counter()
    for entry in entries:
        for theme in entry.themes:
            key = theme.lower()
            if key in labels:
                mentions[key] += 1

    counts = {key: mentions[key] for key in labels if mentions[key] > 0}
    return _rank(counts, labels, limit)


def theme_frequency(entries: Iterable[DreamEntry], limit: int = THEME_LIMIT) -> list[ThemeCount]:
    """Most frequent themes across all entries, regardless of category.

    Case-insensitive; each term is labelled with its first-seen spelling.
    """
    counts: Counter[str] = Counter()
    labels: dict[str, str] = {}
    for entry in entries:
        for theme in entry.themes:
            if not theme.strip():
                continue
            key = theme.lower()
            labels.setdefault(key, theme)
            counts[key] += 1
    return _rank(counts, labels, limit)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _count_in(days: list[date], start: date, end: date) -> int:
    return sum(1 for day in days if start <= day <= end)


def _known_days(entries: Iterable[DreamEntry], day_key: DayKey) -> list[date]:
    days = (entry_day(entry, day_key) for entry in entries)
    return [day for day in days if day is not None]


def monthly_frequency(
    entries: Iterable[DreamEntry],
    now: datetime | None = None,
    months: int = BUCKET_MONTHS,
    day_key: DayKey = local_day,
) -> list[TimeBucket]:
    """Entry counts for the last ``months`` calendar months, oldest first.

    The current month is the last bucket. Empty months are still emitted.
    """
    today = day_key(now or datetime.now())
    days = _known_days(entries, day_key)

    buckets: list[TimeBucket] = []
    for back in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -back)
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])
        buckets.append(
            TimeBucket(
                label=calendar.month_abbr[month],
                start=start,
                end=end,
                count=_count_in(days, start, end),
            )
        )
    return buckets


def weekly_frequency(
    entries: Iterable[DreamEntry],
    now: datetime | None = None,
    weeks: int = BUCKET_WEEKS,
    day_key: DayKey = local_day,
) -> list[TimeBucket]:
    """Entry counts for the last ``weeks`` ISO weeks (Monday start), oldest first."""
    today = day_key(now or datetime.now())
    days = _known_days(entries, day_key)
    this_monday = today - timedelta(days=today.weekday())

    buckets: list[TimeBucket] = []
    for back in range(weeks - 1, -1, -1):
        start = this_monday - timedelta(weeks=back)
        end = start + timedelta(days=6)
        buckets.append(
            TimeBucket(
                label=f"W{start.isocalendar()[1]:02d}",
                start=start,
                end=end,
                count=_count_in(days, start, end),
            )
        )
    return buckets


def lucidity_rate(entries: Iterable[DreamEntry]) -> int:
    """Share of entries with any lucidity, as a rounded percentage."""
    entries = list(entries)
    lucid = sum(1 for entry in entries if entry.is_lucid)
    return percentage(lucid, len(entries))


def monthly_average(entries: Iterable[DreamEntry], months: int = BUCKET_MONTHS) -> int:
    """Entry count spread over a fixed number of months.

    The denominator is always ``months``, not the number of months that
    actually hold entries.
    """
    if months <= 0:
        return 0
    return round_half_up(len(list(entries)) / months)


def filter_by_range(
    entries: Iterable[DreamEntry],
    time_range: TimeRange | str,
    now: datetime | None = None,
    day_key: DayKey = local_day,
) -> list[DreamEntry]:
    """Restrict entries to a recent window of days ending today.

    All-time keeps everything, including entries without a usable date.
    Bounded ranges drop those entries.
    """
    time_range = TimeRange(time_range)
    if time_range is TimeRange.ALL_TIME:
        return list(entries)

    today = day_key(now or datetime.now())
    first = today - timedelta(days=_RANGE_DAYS[time_range] - 1)
    kept: list[DreamEntry] = []
    for entry in entries:
        day = entry_day(entry, day_key)
        if day is not None and day >= first:
            kept.append(entry)
    return kept
