"""
CLI command for measuring mirror latency.
"""

from __future__ import annotations

import json
import sys

import click


@click.command("speed-test")
@click.argument("tool_key")
@click.option("--attempts", "-n", default=3, show_default=True, type=click.IntRange(1, 10),
              help="HEAD requests per mirror.")
@click.option("--timeout", "-t", default=5.0, show_default=True, type=float,
              help="Per-request timeout in seconds.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def speed_test(tool_key: str, attempts: int, timeout: float, as_json: bool) -> None:
    """Probe every mirror of TOOL_KEY and show the fastest."""
    from mirrorwiz.core.registry import RegistryLookupError
    from mirrorwiz.core.services.speed_test import probe_tool

    if not as_json:
        click.echo(f"⏱️  Testing {tool_key} mirrors ({attempts} attempts each)...")
    try:
        result = probe_tool(tool_key, attempts=attempts, timeout=timeout)
    except RegistryLookupError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    ranked = sorted(
        result.results,
        key=lambda r: (r.latency_ms is None, r.latency_ms or 0),
    )
    for r in ranked:
        if r.latency_ms is None:
            click.secho(f"   ✗ {r.name:<22} unreachable", fg="red")
        elif r.fastest:
            click.secho(f"   ★ {r.name:<22} {r.latency_ms} ms", fg="green", bold=True)
        else:
            color = "green" if r.latency_ms < 100 else "yellow" if r.latency_ms < 300 else "red"
            click.secho(f"   • {r.name:<22} {r.latency_ms} ms", fg=color)

    fastest = result.fastest
    if fastest is None:
        click.secho("\n❌ No mirror reachable", fg="red")
        sys.exit(1)
    click.echo(f"\n💡 mirrorwiz render {tool_key} {fastest.mirror}")
