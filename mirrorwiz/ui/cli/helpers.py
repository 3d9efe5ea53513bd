"""
Shared helpers for CLI commands — config and output directory resolution.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mirrorwiz.core.models.site import SiteConfig


def load_site(ctx: click.Context) -> SiteConfig:
    """Load mirrorwiz.yml (or defaults). Exits 1 on an invalid file."""
    from mirrorwiz.core.config.loader import ConfigError, load_site_config

    try:
        return load_site_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def resolve_out_dir(ctx: click.Context, out: str | None, site: SiteConfig) -> Path:
    """``--out`` if given, else ``output_dir`` relative to the config file's directory."""
    if out:
        return Path(out)
    from mirrorwiz.core.config.loader import find_config_file

    config_path: Path | None = ctx.obj.get("config_path") or find_config_file()
    base = config_path.parent.resolve() if config_path else Path.cwd()
    return base / site.output_dir
