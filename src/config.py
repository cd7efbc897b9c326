"""Unified configuration loaded from .dreamlog.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from dreamlog.aggregation import BUCKET_MONTHS, BUCKET_WEEKS, CATEGORY_THEME_LIMIT, THEME_LIMIT
from dreamlog.cloud import CloudConfig
from dreamlog.models import DEFAULT_THEME_CATEGORIES, ThemeCategories, merge_categories
from dreamlog.store import DEFAULT_STORE_KEY, DEFAULT_STORE_PATH, JsonEntryStore
from dreamlog.streak import WEEK_VIEW_DAYS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".dreamlog.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "dreamlog" / "config.toml"


class StoreSectionConfig(BaseModel):
    """[store] section."""

    path: str = str(DEFAULT_STORE_PATH)
    key: str = DEFAULT_STORE_KEY


class AnalyticsSectionConfig(BaseModel):
    """[analytics] section."""

    months: int = BUCKET_MONTHS
    weeks: int = BUCKET_WEEKS
    theme_limit: int = THEME_LIMIT
    category_limit: int = CATEGORY_THEME_LIMIT
    week_window: int = WEEK_VIEW_DAYS


class CloudSectionConfig(BaseModel):
    """[cloud] section."""

    min_font_size: float = 14.0
    max_font_size: float = 40.0
    font_step: float = 4.0
    bold_threshold: int = 2
    columns: int = 4


class DreamlogConfig(BaseModel):
    """Top-level configuration model."""

    store: StoreSectionConfig = Field(default_factory=StoreSectionConfig)
    analytics: AnalyticsSectionConfig = Field(default_factory=AnalyticsSectionConfig)
    cloud: CloudSectionConfig = Field(default_factory=CloudSectionConfig)
    categories: dict[str, list[str]] = Field(default_factory=dict)

    def theme_categories(self) -> ThemeCategories:
        """Built-in categories with user tags merged in."""
        return merge_categories(DEFAULT_THEME_CATEGORIES, self.categories)

    def to_cloud_config(self) -> CloudConfig:
        return CloudConfig(
            min_font_size=self.cloud.min_font_size,
            max_font_size=self.cloud.max_font_size,
            font_step=self.cloud.font_step,
            bold_threshold=self.cloud.bold_threshold,
            columns=self.cloud.columns,
        )

    def open_store(self) -> JsonEntryStore:
        return JsonEntryStore(Path(self.store.path).expanduser(), key=self.store.key)


def load_config(path: str | Path | None = None) -> DreamlogConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .dreamlog.toml in CWD
    3. ~/.config/dreamlog/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged DreamlogConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    try:
        config = DreamlogConfig.model_validate(data) if data else DreamlogConfig()
    except ValidationError as exc:
        logger.warning("Invalid configuration, using defaults: %s", exc)
        config = DreamlogConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: DreamlogConfig, **cli_kwargs: object) -> DreamlogConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "store_path": ("store", "path"),
        "store_key": ("store", "key"),
        "months": ("analytics", "months"),
        "weeks": ("analytics", "weeks"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return DreamlogConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: DreamlogConfig) -> DreamlogConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "DREAMLOG_STORE_PATH": ("store", "path"),
        "DREAMLOG_STORE_KEY": ("store", "key"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    months_raw = os.environ.get("DREAMLOG_MONTHS")
    if months_raw is not None:
        try:
            data["analytics"]["months"] = int(months_raw)
        except ValueError:
            logger.warning("Ignoring non-integer DREAMLOG_MONTHS=%r", months_raw)

    return DreamlogConfig.model_validate(data)
