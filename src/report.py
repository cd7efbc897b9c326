"""Markdown rendering of the analytics summary."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import yaml

from dreamlog.aggregation import TimeBucket
from dreamlog.analytics import AnalyticsSummary
from dreamlog.store import atomic_write

EMPTY_STATE = (
    "Capture at least a few dreams to see insights and patterns in your dream journal."
)


def _frontmatter(summary: AnalyticsSummary, generated: datetime) -> str:
    meta = {
        "type": "dream-analytics",
        "generated": generated.strftime("%Y-%m-%dT%H:%M:%S"),
        "range": summary.time_range.value,
        "total_entries": summary.total_entries,
        "current_streak": summary.streak.current_streak,
        "tags": ["dreams", "analytics"],
    }
    return "---\n" + yaml.safe_dump(meta, sort_keys=False) + "---\n"


def _bar(count: int, peak: int, width: int = 20) -> str:
    if peak <= 0 or count <= 0:
        return ""
    return "█" * max(1, round(count / peak * width))


def _bucket_table(buckets: list[TimeBucket], heading: str) -> list[str]:
    lines = [f"## {heading}", "", "| Period | Dreams | |", "|---|---:|---|"]
    peak = max((b.count for b in buckets), default=0)
    for bucket in buckets:
        lines.append(f"| {bucket.label} | {bucket.count} | {_bar(bucket.count, peak)} |")
    lines.append("")
    return lines


def render_week_strip(summary: AnalyticsSummary) -> str:
    """The calendar strip as two text rows: day letters and day numbers."""
    cells = summary.streak.week_view
    letters = " ".join(f"{c.label:>3}" for c in cells)
    numbers = " ".join(
        f"{('*' if c.has_entry else '') + str(c.day_of_month):>3}" for c in cells
    )
    return f"{letters}\n{numbers}"


def render_report(summary: AnalyticsSummary, generated: datetime | None = None) -> str:
    """Render an analytics summary as markdown with YAML frontmatter."""
    generated = generated or datetime.now()
    lines = [_frontmatter(summary, generated), "# Dream Analytics", ""]

    if summary.is_empty:
        lines.extend(["## No Analytics Yet", "", EMPTY_STATE, ""])
        return "\n".join(lines)

    common = summary.moods.most_common or "-"
    lines.extend(
        [
            "## Overview",
            "",
            f"- **Total Dreams**: {summary.total_entries}",
            f"- **Lucidity Rate**: {summary.lucidity_rate}%",
            f"- **Monthly Average**: {summary.monthly_average}",
            f"- **Common Mood**: {common.capitalize()}",
            f"- **Days in a Row**: {summary.streak.current_streak}",
            "",
            "```",
            render_week_strip(summary),
            "```",
            "",
            "## Mood Distribution",
            "",
        ]
    )
    for s in summary.moods.slices:
        lines.append(f"- {s.mood.capitalize()}: {s.count} ({s.percentage}%)")
    lines.append("")

    lines.extend(_bucket_table(summary.monthly, f"Dream Frequency (Last {len(summary.monthly)} Months)"))
    lines.extend(_bucket_table(summary.weekly, f"Dream Frequency (Last {len(summary.weekly)} Weeks)"))

    lines.extend(["## Recurring Themes", ""])
    if summary.top_themes:
        for theme in summary.top_themes:
            lines.append(f"- {theme.term} ({theme.count})")
    else:
        lines.append("Add themes to your dreams to see pattern analysis here.")
    lines.append("")

    for category, themes in summary.category_themes.items():
        if not themes:
            continue
        lines.extend([f"### {category}", ""])
        lines.append(", ".join(f"{t.term} ({t.count})" for t in themes))
        lines.append("")

    if summary.insights:
        lines.extend(["## Dream Insights", ""])
        for insight in summary.insights:
            lines.append(f"- **{insight.title}**: {insight.body}")
        lines.append("")

    return "\n".join(lines)


def write_report(summary: AnalyticsSummary, path: Path, generated: datetime | None = None) -> Path:
    atomic_write(path, render_report(summary, generated))
    return path
