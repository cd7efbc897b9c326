"""One-call analytics over the journal."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from pydantic import BaseModel, Field

from dreamlog.aggregation import (
    BUCKET_MONTHS,
    BUCKET_WEEKS,
    CATEGORY_THEME_LIMIT,
    THEME_LIMIT,
    MoodDistribution,
    ThemeCount,
    TimeBucket,
    TimeRange,
    category_theme_frequency,
    filter_by_range,
    lucidity_rate,
    monthly_average,
    monthly_frequency,
    mood_distribution,
    theme_frequency,
    weekly_frequency,
)
from dreamlog.insights import Insight, build_insights
from dreamlog.models import DreamEntry
from dreamlog.streak import WEEK_VIEW_DAYS, StreakResult, calculate_streak
from dreamlog.temporal import DayKey, local_day


class AnalyticsSummary(BaseModel):
    """Everything the analytics view shows, as plain data."""

    time_range: TimeRange = TimeRange.ALL_TIME
    total_entries: int = 0
    lucidity_rate: int = 0
    monthly_average: int = 0
    moods: MoodDistribution = Field(default_factory=MoodDistribution)
    top_themes: list[ThemeCount] = Field(default_factory=list)
    category_themes: dict[str, list[ThemeCount]] = Field(default_factory=dict)
    monthly: list[TimeBucket] = Field(default_factory=list)
    weekly: list[TimeBucket] = Field(default_factory=list)
    streak: StreakResult = Field(default_factory=StreakResult)
    insights: list[Insight] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_entries == 0


def analyze(
    entries: Iterable[DreamEntry],
    categories: Mapping[str, Sequence[str]],
    now: datetime | None = None,
    time_range: TimeRange | str = TimeRange.ALL_TIME,
    day_key: DayKey = local_day,
    months: int = BUCKET_MONTHS,
    weeks: int = BUCKET_WEEKS,
    theme_limit: int = THEME_LIMIT,
    category_limit: int = CATEGORY_THEME_LIMIT,
    week_window: int = WEEK_VIEW_DAYS,
) -> AnalyticsSummary:
    """Derive every analytics view from one snapshot of the journal.

    The streak always looks at the whole journal; the other views look at
    the entries inside ``time_range``.

    Args:
        entries: Journal entries in any order.
        categories: Category name to known tags.
        now: Evaluation instant, pinned once for every view.
        time_range: Window applied before aggregation.
        day_key: Maps a timestamp to its calendar day.
        week_window: Days in the streak calendar strip.

    Returns:
        AnalyticsSummary; all zeros and empty lists for an empty journal.
    """
    snapshot = list(entries)
    now = now or datetime.now()
    scoped = filter_by_range(snapshot, time_range, now, day_key)

    moods = mood_distribution(scoped)
    top_themes = theme_frequency(scoped, theme_limit)
    rate = lucidity_rate(scoped)
    average = monthly_average(scoped, months)

    return AnalyticsSummary(
        time_range=TimeRange(time_range),
        total_entries=len(scoped),
        lucidity_rate=rate,
        monthly_average=average,
        moods=moods,
        top_themes=top_themes,
        category_themes={
            name: category_theme_frequency(scoped, name, categories, category_limit)
            for name in categories
        },
        monthly=monthly_frequency(scoped, now, months, day_key),
        weekly=weekly_frequency(scoped, now, weeks, day_key),
        streak=calculate_streak(snapshot, now, day_key, week_window),
        insights=build_insights(len(scoped), rate, average, top_themes, moods.most_common),
    )
