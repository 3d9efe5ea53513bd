"""
CLI commands for building the static site.

Thin wrappers over ``mirrorwiz.core.services.script_generate``,
``page_generate`` and ``sitemap``. Every command prints a summary and
exits 1 on a malformed tool definition, any failed combination or any
output collision. Whatever was written stays on disk.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from mirrorwiz.ui.cli.helpers import load_site, resolve_out_dir

_OUT_OPTION = click.option(
    "--out", "-o", type=click.Path(file_okay=False), default=None,
    help="Output directory (default: output_dir from mirrorwiz.yml).",
)
_JSON_OPTION = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.",
)


@click.group()
def generate() -> None:
    """Generate scripts, pages and the sitemap."""


def _registry_error(e: Exception) -> None:
    click.secho(f"❌ {e}", fg="red")
    sys.exit(1)


def _print_failures(failures: list[dict], collisions: list) -> None:
    if collisions:
        click.secho(f"\n   ❌ Collisions ({len(collisions)}):", fg="red")
        for c in collisions:
            names = ", ".join(
                f"{t}/{o}/{m}" if o else f"{t}/{m}" for t, m, o in c.combinations
            )
            click.echo(f"      → {c.kind} {c.target}: {names}")
    if failures:
        click.secho(f"\n   ❌ Failures ({len(failures)}):", fg="red")
        for f in failures:
            label = f.get("page") or "/".join(
                str(p) for p in (f.get("tool"), f.get("os"), f.get("mirror")) if p
            )
            click.echo(f"      → {label}: {f['error']}")


# ── Scripts ─────────────────────────────────────────────────────

def _run_scripts(ctx: click.Context, out: str | None, as_json: bool):
    from mirrorwiz.core.registry import RegistryConfigError
    from mirrorwiz.core.services.script_generate import generate_scripts

    site = load_site(ctx)
    out_dir = resolve_out_dir(ctx, out, site)
    try:
        report = generate_scripts(out_dir, scripts_dir=site.scripts_dir)
    except RegistryConfigError as e:
        _registry_error(e)

    if as_json:
        return report

    color = "green" if report.ok else "red"
    icon = "✅" if report.ok else "❌"
    click.secho(f"{icon} Scripts: {report.succeeded}/{report.expected} generated", fg=color, bold=True)
    click.echo(f"   Validation passed: {report.validated_ok}")
    if report.validation_warnings:
        click.secho(f"   Validation warnings: {report.validation_warnings}", fg="yellow")
        for entry in report.entries:
            for issue in entry.issues:
                click.echo(f"      → {entry.filename}: {issue}")
    if report.diff_warnings:
        click.secho(f"   ⚠️  OS diff warnings: {report.diff_warnings}", fg="yellow")
    click.echo(f"   Output: {report.output_dir}")
    _print_failures([f.to_dict() for f in report.failures], report.collisions)
    return report


@generate.command("scripts")
@_OUT_OPTION
@_JSON_OPTION
@click.pass_context
def scripts_cmd(ctx: click.Context, out: str | None, as_json: bool) -> None:
    """Render every combination to <out>/scripts/."""
    report = _run_scripts(ctx, out, as_json)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    if not report.ok:
        sys.exit(1)


# ── Pages ───────────────────────────────────────────────────────

def _run_pages(ctx: click.Context, out: str | None, as_json: bool, scripts_from: str | None = None):
    from mirrorwiz.core.registry import RegistryConfigError
    from mirrorwiz.core.services.page_generate import generate_pages

    site = load_site(ctx)
    out_dir = resolve_out_dir(ctx, out, site)
    try:
        report = generate_pages(
            out_dir, site,
            scripts_source=Path(scripts_from) if scripts_from else None,
        )
    except RegistryConfigError as e:
        _registry_error(e)

    if as_json:
        return report

    color = "green" if report.ok else "red"
    icon = "✅" if report.ok else "❌"
    click.secho(f"{icon} Pages: {report.written}/{report.expected} written", fg=color, bold=True)
    if report.scripts_copied:
        click.echo(f"   Scripts copied: {report.scripts_copied}")
    click.echo(f"   Output: {report.output_dir}")
    _print_failures(report.failures, report.collisions)
    return report


@generate.command("pages")
@_OUT_OPTION
@click.option(
    "--scripts-from", type=click.Path(exists=True, file_okay=False), default=None,
    help="Copy generated scripts from this directory into the site.",
)
@_JSON_OPTION
@click.pass_context
def pages_cmd(ctx: click.Context, out: str | None, scripts_from: str | None, as_json: bool) -> None:
    """Render the HTML site to <out>/."""
    report = _run_pages(ctx, out, as_json, scripts_from)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    if not report.ok:
        sys.exit(1)


# ── Sitemap ─────────────────────────────────────────────────────

def _run_sitemap(ctx: click.Context, out: str | None, as_json: bool) -> dict:
    from mirrorwiz.core.services.sitemap import generate_sitemap

    site = load_site(ctx)
    out_dir = resolve_out_dir(ctx, out, site)
    result = generate_sitemap(out_dir, site)

    if not as_json:
        click.secho(f"✅ Sitemap: {result['urls']} URLs", fg="green", bold=True)
        for priority, count in result["by_priority"].items():
            click.echo(f"   priority {priority}: {count}")
        click.echo(f"   Output: {result['path']}")
    return result


@generate.command("sitemap")
@_OUT_OPTION
@_JSON_OPTION
@click.pass_context
def sitemap_cmd(ctx: click.Context, out: str | None, as_json: bool) -> None:
    """Write <out>/sitemap.xml."""
    result = _run_sitemap(ctx, out, as_json)
    if as_json:
        click.echo(json.dumps(result, indent=2))


# ── All ─────────────────────────────────────────────────────────

@generate.command("all")
@_OUT_OPTION
@_JSON_OPTION
@click.pass_context
def all_cmd(ctx: click.Context, out: str | None, as_json: bool) -> None:
    """Scripts, then pages, then the sitemap."""
    scripts = _run_scripts(ctx, out, as_json)
    if not as_json:
        click.echo()
    pages = _run_pages(ctx, out, as_json)
    if not as_json:
        click.echo()
    sitemap = _run_sitemap(ctx, out, as_json)

    ok = scripts.ok and pages.ok
    if as_json:
        click.echo(json.dumps({
            "ok": ok,
            "scripts": scripts.to_dict(),
            "pages": pages.to_dict(),
            "sitemap": sitemap,
        }, indent=2, ensure_ascii=False))
    elif not ok:
        click.echo()
        click.secho("❌ Site generated with errors", fg="red", bold=True)

    if not ok:
        sys.exit(1)
