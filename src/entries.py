"""Creating, searching and ordering journal entries."""

from __future__ import annotations

import random
import string
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from dreamlog.errors import EntryValidationError
from dreamlog.models import DEFAULT_MOOD, NOT_LUCID, DreamEntry
from dreamlog.temporal import parse_entry_date

MIN_TAGS = 3
MAX_TAGS = 10

_ID_ALPHABET = string.digits + string.ascii_lowercase


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def new_entry_id(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Millisecond timestamp followed by nine random base-36 characters."""
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()
    millis = int(now.timestamp() * 1000)
    return str(millis) + "".join(rng.choice(_ID_ALPHABET) for _ in range(9))


def create_entry(
    title: str,
    description: str,
    mood: str | None = None,
    themes: Sequence[str] = (),
    lucidity: str | None = None,
    now: datetime | None = None,
) -> DreamEntry:
    """Build a free-form entry stamped with the creation time.

    Raises:
        EntryValidationError: If the title or description is blank.
    """
    title, description = title.strip(), description.strip()
    if not title or not description:
        raise EntryValidationError("Please provide both a title and description for your dream.")

    now = now or datetime.now(timezone.utc)
    unique_themes: list[str] = []
    for theme in themes:
        theme = theme.strip()
        if theme and theme not in unique_themes:
            unique_themes.append(theme)

    return DreamEntry(
        id=new_entry_id(now),
        title=title,
        description=description,
        date=format_timestamp(now),
        mood=mood or DEFAULT_MOOD,
        themes=unique_themes,
        lucidity=lucidity or NOT_LUCID,
    )


def create_tag_entry(
    tags: Sequence[str],
    mood: str,
    now: datetime | None = None,
) -> DreamEntry:
    """Build an entry from picked tags, with a generated title and description.

    Raises:
        EntryValidationError: With fewer than three or more than ten tags,
            or without a mood.
    """
    picked: list[str] = []
    for tag in tags:
        if tag not in picked:
            picked.append(tag)
    if len(picked) < MIN_TAGS:
        raise EntryValidationError("Please select at least 3 tags to describe your dream.")
    if len(picked) > MAX_TAGS:
        raise EntryValidationError("You can select up to 10 tags maximum.")
    if not mood:
        raise EntryValidationError("Please select how the dream felt.")

    now = now or datetime.now(timezone.utc)
    return DreamEntry(
        id=new_entry_id(now),
        title=f"Dream with {', '.join(picked[:3])}",
        description=f"Tags: {', '.join(picked)}",
        date=format_timestamp(now),
        mood=mood,
        themes=picked,
        lucidity=NOT_LUCID,
    )


def search_entries(entries: Iterable[DreamEntry], term: str) -> list[DreamEntry]:
    """Entries whose title, description or any theme contains ``term``."""
    needle = term.lower()
    return [
        entry
        for entry in entries
        if needle in entry.title.lower()
        or needle in entry.description.lower()
        or any(needle in theme.lower() for theme in entry.themes)
    ]


def sort_newest_first(entries: Iterable[DreamEntry]) -> list[DreamEntry]:
    """Order entries by timestamp, newest first; unparseable dates go last."""
    dated: list[tuple[float, DreamEntry]] = []
    undated: list[DreamEntry] = []
    for entry in entries:
        parsed = parse_entry_date(entry.date)
        if parsed is None:
            undated.append(entry)
            continue
        try:
            # naive timestamps are local time
            dated.append((parsed.timestamp(), entry))
        except (OverflowError, OSError, ValueError):
            undated.append(entry)
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in dated] + undated


def find_entry(entries: Iterable[DreamEntry], prefix: str) -> DreamEntry | None:
    """Entry whose id equals or uniquely starts with ``prefix``."""
    matches = [entry for entry in entries if entry.id.startswith(prefix)]
    exact = [entry for entry in matches if entry.id == prefix]
    if exact:
        return exact[0]
    return matches[0] if len(matches) == 1 else None
