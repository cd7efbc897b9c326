"""Canonical journal models: dream entries and theme categories."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator

DEFAULT_MOOD = "neutral"
NOT_LUCID = "not-lucid"


class Mood(StrEnum):
    """Moods offered by the entry forms."""

    JOYFUL = "joyful"
    PEACEFUL = "peaceful"
    EXCITING = "exciting"
    MYSTERIOUS = "mysterious"
    SCARY = "scary"
    SAD = "sad"
    CONFUSED = "confused"
    NEUTRAL = "neutral"
    NERVOUS = "nervous"
    CONTENT = "content"
    DISAPPOINTED = "disappointed"


class Lucidity(StrEnum):
    """How aware the dreamer was of dreaming."""

    NOT_LUCID = "not-lucid"
    SEMI_LUCID = "semi-lucid"
    FULLY_LUCID = "fully-lucid"


class DreamEntry(BaseModel):
    """A single recorded dream.

    ``mood`` and ``lucidity`` are plain strings rather than the enums above:
    persisted data may carry values from older or newer schemas and those
    are kept verbatim.
    """

    model_config = {"frozen": True}

    id: str
    title: str = ""
    description: str = ""
    date: str = ""
    mood: str = DEFAULT_MOOD
    themes: list[str] = Field(default_factory=list)
    lucidity: str = NOT_LUCID

    @model_validator(mode="before")
    @classmethod
    def fill_missing(cls, data: Any) -> Any:
        """Normalize missing or mistyped fields from older stored records."""
        if isinstance(data, dict):
            data = dict(data)
            if not isinstance(data.get("date"), str):
                data["date"] = ""
            for key in ("mood", "lucidity"):
                value = data.get(key)
                if value is not None and not isinstance(value, str):
                    data[key] = str(value)
            for key in ("title", "description"):
                if data.get(key) is None:
                    data[key] = ""
            if not data.get("mood"):
                data["mood"] = DEFAULT_MOOD
            if not data.get("lucidity"):
                data["lucidity"] = NOT_LUCID
            if data.get("themes") is None:
                data["themes"] = []
        return data

    @property
    def is_lucid(self) -> bool:
        return self.lucidity != NOT_LUCID


ThemeCategories = dict[str, list[str]]

DEFAULT_THEME_CATEGORIES: ThemeCategories = {
    "Sentiments": [
        "Nervous", "Intrigued", "Inquisitive", "Eager", "Pondering",
        "Uneasy", "Engaged", "Wondering", "Fascinated", "Questioning",
    ],
    "People": [
        "Family", "Friends", "Strangers", "Ex-Partner", "Celebrities", "Children",
        "Parents", "Teachers", "Coworkers", "Romantic Interest", "Pet",
    ],
    "Actions": [
        "Flying", "Falling", "Running", "Swimming", "Dancing", "Climbing",
        "Fighting", "Hiding", "Chasing", "Escaping", "Driving", "Exploring",
    ],
    "Places": [
        "School", "Work", "Home", "Beach", "Forest", "City", "Space", "Underground",
        "Hospital", "Restaurant", "Childhood Home", "Unknown Place",
    ],
    "Nature & Elements": [
        "Water", "Fire", "Earth", "Air", "Ocean", "Mountains",
        "Sky", "Rain", "Snow", "Lightning", "Animals", "Plants",
    ],
    "Objects & Items": [
        "Car", "Phone", "Money", "Food", "Clothes", "Books",
        "Mirror", "Keys", "Door", "Window", "Stairs", "Bridge",
    ],
    "Supernatural & Fantasy": [
        "Magic", "Monsters", "Ghosts", "Angels", "Demons", "Superpowers",
        "Time Travel", "Alternate Reality", "Shapeshifting", "Telepathy",
    ],
    "Life Events": [
        "Death", "Birth", "Wedding", "Graduation", "Moving", "Travel",
        "Accident", "Illness", "Success", "Failure", "Tests", "Performance",
    ],
}


def merge_categories(base: ThemeCategories, extra: ThemeCategories) -> ThemeCategories:
    """Overlay user-defined tags onto a category map.

    Tags already present in a category (compared case-insensitively) are
    not duplicated; unknown categories are appended in the order given.
    """
    merged: ThemeCategories = {name: list(tags) for name, tags in base.items()}
    for name, tags in extra.items():
        existing = merged.setdefault(name, [])
        seen = {t.lower() for t in existing}
        for tag in tags:
            if tag.lower() not in seen:
                existing.append(tag)
                seen.add(tag.lower())
    return merged
