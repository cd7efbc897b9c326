"""Tests for src/insights.py: templated insight text."""

import pytest
from dreamlog.aggregation import ThemeCount
from dreamlog.insights import (
    build_insights,
    emotional_insight,
    entry_analysis,
    frequency_insight,
    lucidity_insight,
)
from dreamlog.models import DreamEntry


class TestInsightCards:
    @pytest.mark.parametrize(
        ("rate", "grade"),
        [(45, "Excellent"), (31, "Excellent"), (30, "Good"), (16, "Good"), (15, "Keep practicing"), (0, "Keep practicing")],
    )
    def test_lucidity_grades(self, rate, grade):
        assert lucidity_insight(rate).body.startswith(f"{grade} lucidity rate of {rate}%.")

    def test_lucidity_tip_below_fifteen(self):
        assert "reality checks" in lucidity_insight(10).body
        assert "reality checks" not in lucidity_insight(15).body

    def test_frequency_tips(self):
        assert "closer to your bed" in frequency_insight(2).body
        assert "Great job" in frequency_insight(10).body
        body = frequency_insight(7).body
        assert body == "You're averaging 7 dreams per month."

    def test_emotional_tips(self):
        assert "relaxation" in emotional_insight("scary").body
        assert "positive mindset" in emotional_insight("joyful").body
        assert emotional_insight("Sad").body == "Your dreams are predominantly sad."

    def test_build_insights_empty(self):
        assert build_insights(0, 0, 0, [], None) == []

    def test_build_insights_full(self):
        insights = build_insights(12, 20, 2, [ThemeCount(term="Water", count=5)], "joyful")
        assert [i.title for i in insights] == [
            "Lucidity Progress",
            "Dream Frequency",
            "Recurring Themes",
            "Emotional Patterns",
        ]
        assert '"Water" appears most frequently in your dreams (5 times).' in insights[2].body

    def test_build_insights_without_themes(self):
        insights = build_insights(3, 0, 1, [], "sad")
        assert "Recurring Themes" not in [i.title for i in insights]


class TestEntryAnalysis:
    def test_uses_first_two_themes(self):
        entry = DreamEntry(id="1", mood="joyful", themes=["Flying", "Water", "Fire"])
        text = entry_analysis(entry)
        assert text.startswith("This dream shows themes of Flying and Water,")
        assert "positive emotional states" in text

    def test_unknown_mood_phrase(self):
        entry = DreamEntry(id="1", mood="confused", themes=["Maze"])
        assert "mixed emotional processing" in entry_analysis(entry)

    def test_no_themes(self):
        assert "no recorded themes" in entry_analysis(DreamEntry(id="1"))
