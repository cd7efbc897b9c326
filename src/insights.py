"""Templated insight text.

These are fixed sentences filled in from the aggregate numbers; nothing
here reads the dream text itself.
"""

from __future__ import annotations

from pydantic import BaseModel

from dreamlog.aggregation import ThemeCount
from dreamlog.models import DreamEntry


class Insight(BaseModel):
    title: str
    body: str


def lucidity_insight(rate: int) -> Insight:
    if rate > 30:
        grade = "Excellent"
    elif rate > 15:
        grade = "Good"
    else:
        grade = "Keep practicing"
    body = f"{grade} lucidity rate of {rate}%."
    if rate < 15:
        body += " Try reality checks and dream journaling techniques to improve."
    return Insight(title="Lucidity Progress", body=body)


def frequency_insight(monthly_average: int) -> Insight:
    body = f"You're averaging {monthly_average} dreams per month."
    if monthly_average < 5:
        body += " Consider keeping your journal closer to your bed for easier recording."
    elif monthly_average >= 10:
        body += " Great job maintaining consistent dream recall!"
    return Insight(title="Dream Frequency", body=body)


def recurring_theme_insight(top_theme: ThemeCount) -> Insight:
    return Insight(
        title="Recurring Themes",
        body=(
            f'"{top_theme.term}" appears most frequently in your dreams '
            f"({top_theme.count} times). This might reflect current life "
            "situations or subconscious thoughts."
        ),
    )


def emotional_insight(mood: str) -> Insight:
    body = f"Your dreams are predominantly {mood.lower()}."
    if mood.lower() == "scary":
        body += " Consider relaxation techniques before bed."
    elif mood.lower() == "joyful":
        body += " Your positive mindset shows in your dreams!"
    return Insight(title="Emotional Patterns", body=body)


def build_insights(
    total: int,
    lucidity_rate: int,
    monthly_average: int,
    top_themes: list[ThemeCount],
    most_common_mood: str | None,
) -> list[Insight]:
    """Insight cards for the analytics view; empty when there are no entries."""
    if total == 0:
        return []
    insights = [lucidity_insight(lucidity_rate), frequency_insight(monthly_average)]
    if top_themes:
        insights.append(recurring_theme_insight(top_themes[0]))
    if most_common_mood:
        insights.append(emotional_insight(most_common_mood))
    return insights


_MOOD_PHRASES = {
    "joyful": "positive emotional states",
    "scary": "underlying anxieties or fears",
    "peaceful": "a calm and balanced mindset",
}


def entry_analysis(entry: DreamEntry) -> str:
    """Short analysis blurb shown on a single entry."""
    phrase = _MOOD_PHRASES.get(entry.mood, "mixed emotional processing")
    if entry.themes:
        opening = f"This dream shows themes of {' and '.join(entry.themes[:2])}, "
    else:
        opening = "This dream has no recorded themes yet, "
    return (
        f"{opening}suggesting your subconscious is processing experiences "
        f"related to these areas. The {entry.mood} mood indicates {phrase}."
    )
