"""
Mirror Wizard — CLI entrypoint.

Usage:
    mirrorwiz --help
    mirrorwiz tools list
    mirrorwiz render npm aliyun --part manual
    mirrorwiz generate all --out dist
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mirrorwiz import __version__
from mirrorwiz.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="mirrorwiz")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to mirrorwiz.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Mirror Wizard — package manager mirror scripts and site generator."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = None
    setup_logging(level=level)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", "-p", default=8000, type=int, help="Port number.")
@click.option("--no-speed-test", is_flag=True, help="Do not probe mirrors automatically.")
@click.pass_context
def web(ctx: click.Context, host: str, port: int, no_speed_test: bool) -> None:
    """Serve the generated site and the wizard API."""
    from mirrorwiz.ui.cli.helpers import load_site, resolve_out_dir
    from mirrorwiz.ui.web.server import WizardOptions, create_app, run_server

    site = load_site(ctx)
    site_dir = resolve_out_dir(ctx, None, site)
    if not (site_dir / "index.html").is_file():
        click.secho(f"⚠️  No generated site in {site_dir}", fg="yellow")
        click.echo("   Run 'mirrorwiz generate all' first; the API works without it.")

    app = create_app(site_dir, WizardOptions(auto_speed_test=not no_speed_test), site=site)
    debug = ctx.obj.get("debug", False)

    click.echo()
    click.secho("🪞 Mirror Wizard", bold=True)
    click.echo(f"   Site: http://{host}:{port}")
    click.echo(f"   Root: {site_dir}")
    if debug:
        click.secho("   Logging: DEBUG (all output)", fg="yellow")
    click.echo()

    try:
        run_server(app, host=host, port=port, debug=debug)
    except OSError as e:
        click.secho(f"❌ Cannot start server: {e}", fg="red")
        sys.exit(1)


# ── Register sub-commands from mirrorwiz/ui/cli/ ────────────────────

from mirrorwiz.ui.cli.generate import generate  # noqa: E402
from mirrorwiz.ui.cli.render import render  # noqa: E402
from mirrorwiz.ui.cli.speed import speed_test  # noqa: E402
from mirrorwiz.ui.cli.tools import tools  # noqa: E402
from mirrorwiz.ui.cli.validate import validate  # noqa: E402

cli.add_command(tools)
cli.add_command(render)
cli.add_command(generate)
cli.add_command(validate)
cli.add_command(speed_test)


if __name__ == "__main__":
    cli()
