"""
Configuration loader — reads mirrorwiz.yml into a SiteConfig.

The file is optional: with no mirrorwiz.yml anywhere above the working
directory, every setting takes its default. A file that exists but does
not parse or validate is an error.

Example mirrorwiz.yml::

    site_url: https://mirrors.example.org
    site_name: Example Mirrors
    output_dir: public
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from mirrorwiz.core.models.site import SiteConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "mirrorwiz.yml"


class ConfigError(Exception):
    """Raised when mirrorwiz.yml exists but is invalid, or --config is missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Walk up from ``start_dir`` (default: cwd) looking for mirrorwiz.yml."""
    current = (start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_site_config(path: Path | None = None) -> SiteConfig:
    """Load and validate site settings.

    Args:
        path: Explicit config path (``--config``). Must exist when given.
            If None, searches upward and falls back to defaults.

    Raises:
        ConfigError: The file is unreadable, not YAML, not a mapping, or
            fails validation.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return SiteConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading site config from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return SiteConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept both a flat file and one nested under "site:"
    site_data = data.get("site", data)

    try:
        config = SiteConfig.model_validate(site_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid site configuration in {path}: {e}") from e

    logger.info("Loaded site config '%s' (%s)", config.site_name, config.site_url)
    return config
