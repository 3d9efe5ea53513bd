"""
CLI command for validating generated scripts on disk.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from mirrorwiz.ui.cli.helpers import load_site, resolve_out_dir


@click.command()
@click.argument("directory", required=False, type=click.Path(file_okay=False))
@click.option("--strict", is_flag=True, help="Exit 1 when any script has issues.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(ctx: click.Context, directory: str | None, strict: bool, as_json: bool) -> None:
    """Check every *.sh in DIRECTORY (default: <output_dir>/scripts).

    Findings are advisory; the exit status is 0 unless --strict is given.
    """
    from mirrorwiz.core.services.script_validate import validate_directory

    if directory is None:
        site = load_site(ctx)
        path = resolve_out_dir(ctx, None, site) / site.scripts_dir
    else:
        path = Path(directory)

    try:
        report = validate_directory(path)
    except FileNotFoundError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.secho(f"🔍 Validated {report.total} scripts in {report.directory}", fg="cyan", bold=True)
        click.echo(f"   ✓ Valid: {report.valid}")
        if report.with_issues:
            click.secho(f"   ⚠️  With issues: {report.with_issues}", fg="yellow")
            for result in report.results:
                if result.valid:
                    continue
                click.echo(f"   {result.file}")
                for issue in result.issues:
                    click.echo(f"      → {issue}")

    if strict and report.with_issues:
        sys.exit(1)
