"""
CLI command for rendering a single selection to stdout.
"""

from __future__ import annotations

import sys

import click

PARTS = ("script", "manual", "config")


@click.command()
@click.argument("tool_key")
@click.argument("mirror_key")
@click.option("--os", "os_version", default=None, help="OS version key (apt, yum).")
@click.option(
    "--part",
    type=click.Choice(PARTS),
    default="script",
    show_default=True,
    help="Which output to print.",
)
def render(tool_key: str, mirror_key: str, os_version: str | None, part: str) -> None:
    """Print the script, manual command or config file for one selection.

    \b
    Examples:
        mirrorwiz render npm aliyun --part manual
        mirrorwiz render apt tsinghua --os debian-12 > setup.sh
    """
    from mirrorwiz.core.registry import RegistryError, render_artifact

    try:
        artifact = render_artifact(tool_key, mirror_key, os_version)
    except RegistryError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if part == "manual":
        click.echo(artifact.manual_command)
    elif part == "config":
        if artifact.config_file is None:
            click.secho(f"❌ Tool '{tool_key}' has no standalone config file", fg="red", err=True)
            sys.exit(1)
        click.echo(artifact.config_file, nl=False)
    else:
        click.echo(artifact.script, nl=False)
