"""
CLI commands for browsing the registry.

Thin wrappers over ``mirrorwiz.core.registry``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def tools() -> None:
    """Registry — list tools and their mirrors."""


@tools.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_tools_cmd(as_json: bool) -> None:
    """List every supported tool, grouped by category."""
    from mirrorwiz.core.registry import get_tool, list_categories

    groups = list_categories()

    if as_json:
        data = []
        for group in groups:
            data.append({
                "category": group.key.value,
                "label": group.label,
                "tools": [
                    {
                        "key": key,
                        "name": get_tool(key).info().name,
                        "mirrors": len(get_tool(key).mirrors()),
                        "combinations": get_tool(key).combination_count(),
                    }
                    for key in group.tools
                ],
            })
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    for group in groups:
        click.secho(f"\n{group.icon} {group.label}", fg="cyan", bold=True)
        for key in group.tools:
            tool = get_tool(key)
            info = tool.info()
            flags = []
            if info.requires_os_version:
                flags.append(f"{len(info.os_versions)} OS versions")
            if info.supports_config_file:
                flags.append("config file")
            suffix = f"  [{', '.join(flags)}]" if flags else ""
            click.echo(f"   • {key:<10} {info.name} — {len(tool.mirrors())} mirrors{suffix}")
    click.echo()


@tools.command("show")
@click.argument("tool_key")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def show(tool_key: str, as_json: bool) -> None:
    """Show one tool: metadata, mirrors and OS versions."""
    from mirrorwiz.core.registry import RegistryLookupError, get_tool

    try:
        tool = get_tool(tool_key)
    except RegistryLookupError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    info = tool.info()
    mirrors = tool.mirrors()

    if as_json:
        data = info.model_dump(mode="json")
        data["mirrors"] = [m.model_dump(mode="json") for m in mirrors.values()]
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    click.secho(f"\n{info.icon} {info.full_name}", fg="cyan", bold=True)
    if info.description:
        click.echo(f"   {info.description}")
    click.echo(f"   Category:  {info.category.label}")
    click.echo(f"   Platforms: {', '.join(info.platforms)}")
    if info.supports_config_file:
        click.echo(f"   Config:    {info.config_file_name}")

    if info.requires_os_version:
        click.secho("\n   OS versions:", bold=True)
        for key, label in info.os_versions.items():
            click.echo(f"     • {key:<16} {label}")

    click.secho("\n   Mirrors:", bold=True)
    for mirror in mirrors.values():
        click.echo(f"     • {mirror.key:<10} {mirror.name:<22} {mirror.url}")
        if mirror.note:
            click.secho(f"       ⚠️  {mirror.note}", fg="yellow")
    click.echo()
