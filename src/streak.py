"""Consecutive-day streak and the recent-days calendar strip."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from dreamlog.models import DreamEntry
from dreamlog.temporal import DayIndex, DayKey, build_day_index, local_day

WEEK_VIEW_DAYS = 7


class WeekDay(BaseModel):
    """One cell of the calendar strip."""

    day: date
    label: str
    day_of_month: int
    has_entry: bool = False
    is_today: bool = False


class StreakResult(BaseModel):
    current_streak: int = 0
    week_view: list[WeekDay] = Field(default_factory=list)


def current_streak(index: DayIndex, today: date) -> int:
    """Length of the unbroken run of entry days ending today or yesterday.

    A run whose latest day is two or more days old counts as zero, however
    long it was.
    """
    latest = index.latest_day
    if latest is None or (today - latest).days not in (0, 1):
        return 0

    streak = 0
    cursor = today
    for day in index.days:
        if (cursor - day).days > 1:
            break
        streak += 1
        cursor = day
    return streak


def build_week_view(index: DayIndex, today: date, length: int = WEEK_VIEW_DAYS) -> list[WeekDay]:
    """Calendar cells for ``today`` and the preceding days, oldest first."""
    cells: list[WeekDay] = []
    for offset in range(length - 1, -1, -1):
        day = today - timedelta(days=offset)
        cells.append(
            WeekDay(
                day=day,
                label=day.strftime("%a")[0],
                day_of_month=day.day,
                has_entry=index.has_entry(day),
                is_today=offset == 0,
            )
        )
    return cells


def calculate_streak(
    entries: Iterable[DreamEntry],
    now: datetime | None = None,
    day_key: DayKey = local_day,
    window: int = WEEK_VIEW_DAYS,
) -> StreakResult:
    """Compute the current streak and week view.

    Args:
        entries: Journal entries in any order.
        now: Evaluation instant; defaults to the current local time.
        day_key: Maps a timestamp to its calendar day. Applied to ``now``
            as well so both sides agree on day boundaries.
        window: Number of days in the calendar strip.

    Returns:
        StreakResult with the streak length and ``window`` calendar cells.
    """
    index = build_day_index(entries, day_key)
    today = day_key(now or datetime.now())
    return StreakResult(
        current_streak=current_streak(index, today),
        week_view=build_week_view(index, today, window),
    )
