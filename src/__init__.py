"""Dream journal analytics: streaks, frequency tables and tag-cloud layout."""

from dreamlog.aggregation import (
    MoodDistribution,
    ThemeCount,
    TimeBucket,
    TimeRange,
    category_theme_frequency,
    lucidity_rate,
    monthly_average,
    monthly_frequency,
    mood_distribution,
    theme_frequency,
    weekly_frequency,
)
from dreamlog.analytics import AnalyticsSummary, analyze
from dreamlog.cloud import CloudConfig, CloudPlacement, layout_cloud
from dreamlog.models import DEFAULT_THEME_CATEGORIES, DreamEntry, Lucidity, Mood
from dreamlog.store import JsonEntryStore
from dreamlog.streak import StreakResult, WeekDay, calculate_streak
from dreamlog.temporal import DayIndex, build_day_index, local_day, parse_entry_date

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_THEME_CATEGORIES",
    "AnalyticsSummary",
    "CloudConfig",
    "CloudPlacement",
    "DayIndex",
    "DreamEntry",
    "JsonEntryStore",
    "Lucidity",
    "Mood",
    "MoodDistribution",
    "StreakResult",
    "ThemeCount",
    "TimeBucket",
    "TimeRange",
    "WeekDay",
    "analyze",
    "build_day_index",
    "calculate_streak",
    "category_theme_frequency",
    "layout_cloud",
    "local_day",
    "lucidity_rate",
    "monthly_average",
    "monthly_frequency",
    "mood_distribution",
    "parse_entry_date",
    "theme_frequency",
    "weekly_frequency",
]
