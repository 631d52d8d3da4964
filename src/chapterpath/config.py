"""Configuration loading and validation for mdbook-chapter-path."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from chapterpath.core.errors import ConfigError

logger = logging.getLogger(__name__)

PREPROCESSOR_NAME = "chapter-path"
DEFAULT_SITE_PATH = "/"


class ChapterPathConfig(BaseModel):
    """Settings for one preprocessor run."""

    site_path: str = Field(default=DEFAULT_SITE_PATH, description="Prefix for every link")
    strict_mode: bool = Field(default=False, description="Fail on duplicate chapter names")

    @field_validator("site_path")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Make sure the site path ends with '/'."""
        if not v.endswith("/"):
            v += "/"
        return v


def load_config(
    book_config: dict[str, Any] | None = None,
    path: str | None = None,
) -> ChapterPathConfig:
    """Build the run configuration from book.toml, a YAML file and the environment.

    Later sources win:
        1. defaults
        2. book.toml: output.html.site-url, preprocessor.chapter-path.strict
        3. YAML file at ``path`` (keys: site_path, strict_mode)
        4. CHAPTERPATH_SITE_PATH and CHAPTERPATH_STRICT environment variables

    Args:
        book_config: The parsed book.toml as passed in the mdBook context.
        path: Optional path to a YAML override file.

    Returns:
        Validated ChapterPathConfig.

    Raises:
        ConfigError: If the YAML file is missing, unreadable or invalid,
            or the merged values fail validation.
    """
    data: dict[str, Any] = _from_book_config(book_config or {})

    if path is not None:
        data.update(_load_yaml(Path(path).expanduser()))

    env_site_path = os.environ.get("CHAPTERPATH_SITE_PATH")
    if env_site_path:
        data["site_path"] = env_site_path

    env_strict = os.environ.get("CHAPTERPATH_STRICT")
    if env_strict:
        data["strict_mode"] = env_strict

    try:
        return ChapterPathConfig(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _from_book_config(book_config: dict[str, Any]) -> dict[str, Any]:
    """Pick our settings out of the book.toml tables."""
    data: dict[str, Any] = {}

    html = book_config.get("output", {}).get("html", {})
    if "site-url" in html:
        site_url = html["site-url"]
        if isinstance(site_url, str):
            data["site_path"] = site_url
        else:
            logger.warning("Ignoring output.html.site-url: expected a string, got %r", site_url)

    table = book_config.get("preprocessor", {}).get(PREPROCESSOR_NAME, {})
    if "strict" in table:
        data["strict_mode"] = table["strict"]

    return data


def _load_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        raw = config_path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    unknown = set(data) - set(ChapterPathConfig.model_fields)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    return data
