"""CLI interface for dreamlog."""

import json
import logging
from datetime import datetime, time
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from dreamlog.aggregation import TimeRange, category_theme_frequency, theme_frequency
from dreamlog.analytics import analyze
from dreamlog.cloud import layout_cloud
from dreamlog.config import DreamlogConfig, load_config, merge_cli_overrides
from dreamlog.entries import (
    create_entry,
    create_tag_entry,
    find_entry,
    search_entries,
    sort_newest_first,
)
from dreamlog.errors import EntryValidationError
from dreamlog.insights import entry_analysis
from dreamlog.models import DreamEntry, Lucidity, Mood
from dreamlog.report import EMPTY_STATE, render_week_strip, write_report
from dreamlog.streak import calculate_streak
from dreamlog.temporal import parse_entry_date

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dreamlog",
    help="Record dreams and explore streaks, moods and recurring themes.",
)

console = Console()
_stderr_console = Console(stderr=True)


class _State:
    config: DreamlogConfig = DreamlogConfig()


state = _State()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from dreamlog import __version__

        console.print(f"dreamlog {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .dreamlog.toml file."),
    ] = None,
    store_path: Annotated[
        Optional[Path],
        typer.Option("--store", help="Journal file to read and write."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Dreamlog - a dream journal with streaks and pattern analytics."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    state.config = merge_cli_overrides(load_config(config_path), store_path=store_path)


def _load_entries() -> list[DreamEntry]:
    store = state.config.open_store()
    entries = store.load_all()
    if not store.last_report.clean:
        _stderr_console.print(f"[yellow]{store.last_report.summary_text()}[/yellow]")
    return entries


def _parse_now(value: str | None) -> datetime | None:
    """Evaluation instant for --date: the end of that local day."""
    if value is None:
        return None
    try:
        return datetime.combine(datetime.strptime(value, "%Y-%m-%d").date(), time(23, 59, 59))
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date format: {value}")
        console.print("Use YYYY-MM-DD format (e.g., 2026-02-05)")
        raise typer.Exit(1)


def _check_format(output_format: str) -> None:
    if output_format not in ("table", "json"):
        console.print(f"[red]Error:[/red] Unknown format: {output_format}")
        console.print("Valid formats: table, json")
        raise typer.Exit(1)


def _print_json(data: object) -> None:
    console.print_json(json.dumps(data, default=str))


def _display_date(entry: DreamEntry) -> str:
    parsed = parse_entry_date(entry.date)
    if parsed is None:
        return "unknown date"
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone()
        except (OverflowError, ValueError):
            return "unknown date"
    return parsed.strftime("%m-%d-%Y")


def _save(entry: DreamEntry) -> None:
    store = state.config.open_store()
    if not store.append(entry):
        console.print(f"[red]Error:[/red] Could not save the journal to {store.path}")
        raise typer.Exit(1)
    console.print(f"[green]Dream captured[/green] ({entry.id})")


@app.command(name="add")
def add_cmd(
    title: Annotated[str, typer.Option("--title", "-t", help="Dream title.")],
    description: Annotated[str, typer.Option("--description", "-d", help="What happened.")],
    mood: Annotated[
        Optional[str],
        typer.Option("--mood", "-m", help=f"Mood: {', '.join(m.value for m in Mood)}."),
    ] = None,
    theme: Annotated[
        Optional[list[str]],
        typer.Option("--theme", help="Theme tag (repeatable)."),
    ] = None,
    lucidity: Annotated[
        Optional[str],
        typer.Option("--lucidity", "-l", help=f"Lucidity: {', '.join(x.value for x in Lucidity)}."),
    ] = None,
) -> None:
    """Record a dream with a title and description."""
    if lucidity is not None and lucidity not in {x.value for x in Lucidity}:
        console.print(f"[red]Error:[/red] Unknown lucidity: {lucidity}")
        raise typer.Exit(1)
    try:
        entry = create_entry(title, description, mood=mood, themes=theme or [], lucidity=lucidity)
    except EntryValidationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    _save(entry)


@app.command(name="tag")
def tag_cmd(
    tags: Annotated[list[str], typer.Argument(help="Between 3 and 10 dream tags.")],
    mood: Annotated[str, typer.Option("--mood", "-m", help="How the dream felt.")],
) -> None:
    """Record a dream from a handful of tags."""
    try:
        entry = create_tag_entry(tags, mood)
    except EntryValidationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    _save(entry)


@app.command(name="list")
def list_cmd(
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-s", help="Filter by title, description or theme."),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum entries to show.")] = 20,
    output_format: Annotated[str, typer.Option("--format", "-f", help="table or json.")] = "table",
) -> None:
    """List dreams, newest first."""
    _check_format(output_format)
    entries = _load_entries()
    if search:
        entries = search_entries(entries, search)
    entries = sort_newest_first(entries)[:limit]

    if output_format == "json":
        _print_json([e.model_dump(mode="json") for e in entries])
        return

    if not entries:
        if search:
            console.print("[yellow]No Dreams Found.[/yellow] Try adjusting your search terms.")
        else:
            console.print("[yellow]No Dreams Yet.[/yellow] Start capturing your dreams.")
        return

    table = Table(title="Dream Journal")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Mood")
    table.add_column("Title")
    table.add_column("Themes")
    for entry in entries:
        themes = ", ".join(entry.themes[:4])
        if len(entry.themes) > 4:
            themes += f" +{len(entry.themes) - 4}"
        table.add_row(entry.id, _display_date(entry), entry.mood, entry.title, themes)
    console.print(table)


@app.command(name="show")
def show_cmd(
    entry_id: Annotated[str, typer.Argument(help="Entry id or a unique prefix of it.")],
) -> None:
    """Show one dream with its analysis."""
    entry = find_entry(_load_entries(), entry_id)
    if entry is None:
        console.print(f"[red]Error:[/red] No dream matches id {entry_id}")
        raise typer.Exit(1)

    console.print(f"[bold]{entry.title}[/bold]  ({_display_date(entry)}, {entry.mood})")
    if entry.themes:
        console.print("Themes: " + ", ".join(entry.themes))
    console.print()
    console.print(entry.description)
    console.print()
    console.print("[bold]Dream Analysis[/bold]")
    console.print(entry_analysis(entry))


@app.command(name="streak")
def streak_cmd(
    target_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Evaluate as of YYYY-MM-DD. Defaults to now."),
    ] = None,
    output_format: Annotated[str, typer.Option("--format", "-f", help="table or json.")] = "table",
) -> None:
    """Show the days-in-a-row streak and the last seven days."""
    _check_format(output_format)
    now = _parse_now(target_date)
    result = calculate_streak(_load_entries(), now, window=state.config.analytics.week_window)

    if output_format == "json":
        _print_json(result.model_dump(mode="json"))
        return

    table = Table(title="Days in a Row", show_header=True)
    for cell in result.week_view:
        table.add_column(cell.label, justify="center", style="bold" if cell.is_today else None)
    table.add_row(
        *[
            f"[green]{c.day_of_month}[/green]" if c.has_entry else f"[dim]{c.day_of_month}[/dim]"
            for c in result.week_view
        ]
    )
    console.print(table)
    console.print(f"Current streak: [bold]{result.current_streak}[/bold]")


@app.command(name="stats")
def stats_cmd(
    time_range: Annotated[
        str,
        typer.Option("--range", "-r", help="all-time, last-month or last-week."),
    ] = TimeRange.ALL_TIME.value,
    target_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Evaluate as of YYYY-MM-DD. Defaults to now."),
    ] = None,
    output_format: Annotated[str, typer.Option("--format", "-f", help="table or json.")] = "table",
) -> None:
    """Show mood, lucidity and frequency analytics."""
    _check_format(output_format)
    valid_ranges = [r.value for r in TimeRange]
    if time_range not in valid_ranges:
        console.print(f"[red]Error:[/red] Unknown range: {time_range}")
        console.print(f"Valid ranges: {', '.join(valid_ranges)}")
        raise typer.Exit(1)

    config = state.config
    summary = analyze(
        _load_entries(),
        config.theme_categories(),
        now=_parse_now(target_date),
        time_range=time_range,
        months=config.analytics.months,
        weeks=config.analytics.weeks,
        theme_limit=config.analytics.theme_limit,
        category_limit=config.analytics.category_limit,
        week_window=config.analytics.week_window,
    )

    if output_format == "json":
        _print_json(summary.model_dump(mode="json"))
        return

    if summary.is_empty:
        console.print("[yellow]No Analytics Yet.[/yellow] " + EMPTY_STATE)
        return

    overview = Table(title="Dream Vibes", show_header=False)
    overview.add_row("Total Dreams", str(summary.total_entries))
    overview.add_row("Lucidity Rate", f"{summary.lucidity_rate}%")
    overview.add_row("Monthly Average", str(summary.monthly_average))
    overview.add_row("Common Mood", (summary.moods.most_common or "-").capitalize())
    overview.add_row("Days in a Row", str(summary.streak.current_streak))
    console.print(overview)

    moods = Table(title="Mood Distribution")
    moods.add_column("Mood")
    moods.add_column("Dreams", justify="right")
    moods.add_column("Share", justify="right")
    for s in summary.moods.slices:
        moods.add_row(s.mood.capitalize(), str(s.count), f"{s.percentage}%")
    console.print(moods)

    monthly = Table(title=f"Dream Frequency (Last {len(summary.monthly)} Months)")
    monthly.add_column("Month")
    monthly.add_column("Dreams", justify="right")
    for bucket in summary.monthly:
        monthly.add_row(bucket.label, str(bucket.count))
    console.print(monthly)

    for insight in summary.insights:
        console.print(f"[bold]{insight.title}[/bold]: {insight.body}")

    console.print()
    console.print(render_week_strip(summary), highlight=False)


@app.command(name="themes")
def themes_cmd(
    category: Annotated[
        Optional[str],
        typer.Option("--category", help="Limit to one theme category."),
    ] = None,
    output_format: Annotated[str, typer.Option("--format", "-f", help="table or json.")] = "table",
) -> None:
    """Show the most recurring themes, overall or within a category."""
    _check_format(output_format)
    config = state.config
    categories = config.theme_categories()
    entries = _load_entries()

    if category is not None and category not in categories:
        console.print(f"[red]Error:[/red] Unknown category: {category}")
        console.print(f"Categories: {', '.join(categories)}")
        raise typer.Exit(1)

    if category:
        counts = category_theme_frequency(entries, category, categories, config.analytics.category_limit)
    else:
        counts = theme_frequency(entries, config.analytics.theme_limit)

    if output_format == "json":
        _print_json([c.model_dump() for c in counts])
        return

    if not counts:
        console.print("Add themes to your dreams to see pattern analysis here.")
        return

    table = Table(title=f"Recurring Themes{f' - {category}' if category else ''}")
    table.add_column("Theme")
    table.add_column("Count", justify="right")
    for c in counts:
        table.add_row(c.term, str(c.count))
    console.print(table)


@app.command(name="cloud")
def cloud_cmd(
    category: Annotated[
        Optional[str],
        typer.Option("--category", help="Build the cloud from one theme category."),
    ] = None,
    output_format: Annotated[str, typer.Option("--format", "-f", help="table or json.")] = "json",
) -> None:
    """Compute tag-cloud placements for the top themes."""
    _check_format(output_format)
    config = state.config
    categories = config.theme_categories()
    entries = _load_entries()

    if category is not None and category not in categories:
        console.print(f"[red]Error:[/red] Unknown category: {category}")
        raise typer.Exit(1)

    if category:
        counts = category_theme_frequency(entries, category, categories, config.analytics.category_limit)
    else:
        counts = theme_frequency(entries, config.analytics.category_limit)
    placements = layout_cloud(counts, config.to_cloud_config())

    if output_format == "json":
        _print_json([p.model_dump() for p in placements])
        return

    table = Table(title="Theme Cloud")
    for column in ("Theme", "Size", "Opacity", "Weight", "Left %", "Top %", "Rotation"):
        table.add_column(column)
    for p in placements:
        table.add_row(
            p.text,
            f"{p.font_size:g}",
            f"{p.opacity:.1f}",
            p.font_weight,
            f"{p.left_percent:g}",
            f"{p.top_percent:g}",
            f"{p.rotation_degrees:g}",
        )
    console.print(table)


@app.command(name="report")
def report_cmd(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Markdown file to write."),
    ] = Path("dream-analytics.md"),
    time_range: Annotated[
        str,
        typer.Option("--range", "-r", help="all-time, last-month or last-week."),
    ] = TimeRange.ALL_TIME.value,
    target_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Evaluate as of YYYY-MM-DD. Defaults to now."),
    ] = None,
) -> None:
    """Write the analytics as an Obsidian-friendly markdown note."""
    if time_range not in [r.value for r in TimeRange]:
        console.print(f"[red]Error:[/red] Unknown range: {time_range}")
        raise typer.Exit(1)

    config = state.config
    now = _parse_now(target_date)
    summary = analyze(
        _load_entries(),
        config.theme_categories(),
        now=now,
        time_range=time_range,
        months=config.analytics.months,
        weeks=config.analytics.weeks,
        theme_limit=config.analytics.theme_limit,
        category_limit=config.analytics.category_limit,
        week_window=config.analytics.week_window,
    )
    path = write_report(summary, output, generated=now)
    logger.debug("Report written to %s", path)
    console.print(f"[bold green]Report written:[/bold green] {path}")


if __name__ == "__main__":
    app()
