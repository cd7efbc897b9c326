"""Deterministic word-cloud placement.

Terms are dropped onto a coarse grid and nudged by a pseudo-random offset
seeded from the term's characters, so a theme always lands in the same
spot for the same position in the list. There is no collision detection.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel

from dreamlog.aggregation import ThemeCount

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

SAFE_MIN_PERCENT = 5.0
SAFE_MAX_PERCENT = 85.0
JITTER_PERCENT = 10.0
MAX_ROTATION = 10.0


class CloudConfig(BaseModel):
    """Sizing rules for the cloud."""

    min_font_size: float = 14.0
    max_font_size: float = 40.0
    font_step: float = 4.0
    min_opacity: float = 0.5
    max_opacity: float = 1.0
    opacity_step: float = 0.1
    bold_threshold: int = 2
    columns: int = 4


class CloudPlacement(BaseModel):
    text: str
    font_size: float
    opacity: float
    font_weight: str
    left_percent: float
    top_percent: float
    rotation_degrees: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def term_seed(term: str) -> int:
    """Sum of the term's character codes."""
    return sum(ord(ch) for ch in term)


def seeded_random(seed: int, offset: int) -> float:
    """One linear-congruential step from ``seed + offset``, scaled to [0, 1)."""
    return ((seed + offset) * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS / LCG_MODULUS


def font_size(weight: int, config: CloudConfig) -> float:
    return _clamp(
        config.min_font_size + weight * config.font_step,
        config.min_font_size,
        config.max_font_size,
    )


def opacity(weight: int, config: CloudConfig) -> float:
    return _clamp(
        config.min_opacity + weight * config.opacity_step,
        config.min_opacity,
        config.max_opacity,
    )


def place_term(
    term: str,
    weight: int,
    index: int,
    total: int,
    config: CloudConfig | None = None,
) -> CloudPlacement:
    """Placement of one term given its position in a list of ``total`` terms."""
    config = config or CloudConfig()
    columns = max(1, config.columns)
    rows = max(1, math.ceil(total / columns))
    cell_width = 100.0 / columns
    cell_height = 100.0 / rows

    column, row = index % columns, index // columns
    seed = term_seed(term)

    jitter_x = (seeded_random(seed, 1) - 0.5) * 2 * JITTER_PERCENT
    jitter_y = (seeded_random(seed, 2) - 0.5) * 2 * JITTER_PERCENT
    left = column * cell_width + cell_width / 2 + jitter_x
    top = row * cell_height + cell_height / 2 + jitter_y

    return CloudPlacement(
        text=term,
        font_size=font_size(weight, config),
        opacity=opacity(weight, config),
        font_weight="bold" if weight > config.bold_threshold else "normal",
        left_percent=round(_clamp(left, SAFE_MIN_PERCENT, SAFE_MAX_PERCENT), 2),
        top_percent=round(_clamp(top, SAFE_MIN_PERCENT, SAFE_MAX_PERCENT), 2),
        rotation_degrees=round((seeded_random(seed, 3) - 0.5) * 2 * MAX_ROTATION, 2),
    )


def layout_cloud(
    terms: Sequence[ThemeCount | tuple[str, int]],
    config: CloudConfig | None = None,
) -> list[CloudPlacement]:
    """Lay out an already ranked list of ``(term, weight)`` pairs.

    Args:
        terms: ThemeCount records or plain ``(term, weight)`` tuples.
        config: Sizing rules; defaults to CloudConfig().

    Returns:
        One placement per term, in input order.
    """
    pairs = [(t.term, t.count) if isinstance(t, ThemeCount) else (t[0], t[1]) for t in terms]
    return [
        place_term(term, weight, index, len(pairs), config)
        for index, (term, weight) in enumerate(pairs)
    ]
