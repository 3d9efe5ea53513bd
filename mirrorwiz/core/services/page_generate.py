"""
Page generation — the static site.

Site layout:
  /index.html                                home
  /tools/index.html                          tool overview, grouped by category
  /tools/{tool}/index.html                   tool page: mirrors, OS selection
  /tools/{tool}/{mirror}/index.html          combination page
  /tools/{tool}/{os}/{mirror}/index.html     combination page (OS-versioned tools)
  /{scripts_dir}/*.sh                        copied from the script output

Combination pages embed the rendered script, manual command and config
file HTML-escaped inside ``<code data-part="...">`` blocks; unescaping a
block gives back the render output byte for byte.
"""

from __future__ import annotations

import html
import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from mirrorwiz.core.models.artifact import GeneratedArtifact
from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.persistence.site_files import write_text
from mirrorwiz.core.registry import (
    MirrorTool,
    RenderContext,
    build_artifact,
    check_registry,
    list_categories,
    list_tools,
)
from mirrorwiz.core.services.paths import (
    Collision,
    colliding_combinations,
    find_collisions,
    page_path,
)

logger = logging.getLogger(__name__)

_e = html.escape


# ── Result ──────────────────────────────────────────────────────────


@dataclass
class PageGenerationReport:
    """Summary of a page generation run."""

    output_dir: str
    expected: int = 0
    pages: list[str] = field(default_factory=list)
    failures: list[dict] = field(default_factory=list)
    collisions: list[Collision] = field(default_factory=list)
    scripts_copied: int = 0

    @property
    def written(self) -> int:
        return len(self.pages)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.collisions

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "output_dir": self.output_dir,
            "expected": self.expected,
            "written": self.written,
            "scripts_copied": self.scripts_copied,
            "failures": self.failures,
            "collisions": [c.to_dict() for c in self.collisions],
        }


# ── Layout ──────────────────────────────────────────────────────────

_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: system-ui, -apple-system, sans-serif;
               background: #0f1117; color: #e0e0e0; line-height: 1.6; }
        main { max-width: 1000px; margin: 0 auto; padding: 3rem 1.5rem; }
        a { color: #818cf8; }
        h1 { font-size: 1.8rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 0.75rem; }
        .subtitle { color: #888; margin-bottom: 2rem; }
        .breadcrumb { font-size: 0.9rem; color: #888; margin-bottom: 1.5rem; }
        .breadcrumb a { color: #aaa; text-decoration: none; }
        .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr));
                gap: 1rem; }
        .card { background: #1a1d27; border: 1px solid #2a2d37; border-radius: 12px;
                padding: 1.25rem; text-decoration: none; color: #e0e0e0; display: block; }
        .card:hover { border-color: #6366f1; }
        .card p { color: #888; font-size: 0.9rem; }
        .note { color: #fbbf24; font-size: 0.85rem; margin-top: 0.5rem; }
        pre { background: #161922; border: 1px solid #2a2d37; border-radius: 8px;
              padding: 1rem; overflow-x: auto; font-size: 0.85rem; }
        .btn { display: inline-block; margin-top: 1rem; padding: 0.5rem 1rem;
               border-radius: 8px; background: #6366f1; color: #fff; text-decoration: none; }
"""


def _layout(site: SiteConfig, *, title: str, description: str, path: str, body: str) -> str:
    url = site.site_url + path
    structured = json.dumps({
        "@context": "https://schema.org",
        "@type": "HowTo",
        "name": title,
        "description": description,
        "url": url,
    }, ensure_ascii=False).replace("</", "<\\/")
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{_e(title)}</title>
    <meta name="description" content="{_e(description)}">
    <meta property="og:title" content="{_e(title)}">
    <meta property="og:description" content="{_e(description)}">
    <meta property="og:url" content="{_e(url)}">
    <link rel="canonical" href="{_e(url)}">
    <script type="application/ld+json">{structured}</script>
    <style>{_STYLE}    </style>
</head>
<body>
<main>
{body}
</main>
</body>
</html>
"""


def _breadcrumb(parts: list[tuple[str, str]]) -> str:
    links = [f'<a href="{_e(url)}">{_e(label)}</a>' for label, url in parts]
    return f'<nav class="breadcrumb">{" › ".join(links)}</nav>'


def _code_block(part: str, text: str) -> str:
    return f'<pre><code data-part="{part}">{_e(text)}</code></pre>'


# ── Pages ───────────────────────────────────────────────────────────


def render_home_page(site: SiteConfig, tools: list[MirrorTool]) -> str:
    sections = []
    for group in list_categories(tools):
        cards = []
        for tool in tools:
            if tool.key not in group.tools:
                continue
            info = tool.info()
            cards.append(
                f'<a class="card" href="/tools/{_e(info.key)}/">'
                f"<h3>{_e(info.icon)} {_e(info.name)}</h3>"
                f"<p>{len(tool.mirrors())} mirrors</p></a>"
            )
        sections.append(
            f"<h2>{_e(group.icon)} {_e(group.label)}</h2>\n"
            f'<div class="grid">{"".join(cards)}</div>'
        )
    body = "\n".join([
        f"<h1>🚀 {_e(site.site_name)}</h1>",
        '<p class="subtitle">Pick a package manager, pick a mirror, '
        "run one command.</p>",
        '<p><a href="/tools/">Browse all tools →</a></p>',
        *sections,
    ])
    return _layout(
        site,
        title=site.site_name,
        description="One-command mirror setup for apt, npm, pip, docker and more.",
        path="/",
        body=body,
    )


def render_tools_overview(site: SiteConfig, tools: list[MirrorTool]) -> str:
    by_key = {t.key: t for t in tools}
    sections = []
    for group in list_categories(tools):
        cards = []
        for key in group.tools:
            info = by_key[key].info()
            cards.append(
                f'<a class="card" href="/tools/{_e(key)}/">'
                f"<h3>{_e(info.icon)} {_e(info.full_name)}</h3>"
                f"<p>{_e(info.description)}</p></a>"
            )
        sections.append(
            f"<h2>{_e(group.icon)} {_e(group.label)}</h2>\n"
            f'<div class="grid">{"".join(cards)}</div>'
        )
    body = "\n".join([
        _breadcrumb([("Home", "/"), ("Tools", "/tools/")]),
        "<h1>🧰 All tools</h1>",
        *sections,
    ])
    return _layout(
        site,
        title=f"All tools - {site.site_name}",
        description="Every package manager with ready-made mirror setup scripts.",
        path="/tools/",
        body=body,
    )


def render_tool_page(site: SiteConfig, tool: MirrorTool) -> str:
    info = tool.info()
    mirrors = tool.mirrors()
    path = f"/tools/{info.key}/"

    parts = [
        _breadcrumb([("Home", "/"), ("Tools", "/tools/"), (info.name, path)]),
        f"<h1>{_e(info.icon)} {_e(info.full_name)}</h1>",
        f'<p class="subtitle">{_e(info.description)}</p>',
    ]
    links = []
    if info.official_site:
        links.append(f'<a href="{_e(info.official_site)}">Official site</a>')
    if info.documentation:
        links.append(f'<a href="{_e(info.documentation)}">Documentation</a>')
    if links:
        parts.append(f"<p>{' · '.join(links)}</p>")
    if info.supports_config_file:
        parts.append(f"<p>Config file: <code>{_e(info.config_file_name)}</code></p>")

    if tool.requires_os_version:
        for os_version, label in info.os_versions.items():
            cards = [
                f'<a class="card" href="{_e(page_path(info.key, m.key, os_version))}">'
                f"<h3>{_e(m.name)}</h3><p>{_e(m.host)}</p>{_note(m.note)}</a>"
                for m in mirrors.values()
            ]
            parts.append(f"<h2>{_e(label)}</h2>")
            parts.append(f'<div class="grid">{"".join(cards)}</div>')
    else:
        cards = [
            f'<a class="card" href="{_e(page_path(info.key, m.key))}">'
            f"<h3>{_e(m.name)}</h3><p>{_e(m.host)}</p>{_note(m.note)}</a>"
            for m in mirrors.values()
        ]
        parts.append("<h2>Choose a mirror</h2>")
        parts.append(f'<div class="grid">{"".join(cards)}</div>')

    return _layout(
        site,
        title=f"{info.full_name} mirrors - {site.site_name}",
        description=f"Mirror setup scripts for {info.full_name}.",
        path=path,
        body="\n".join(parts),
    )


def _note(note: str) -> str:
    return f'<p class="note">⚠️ {_e(note)}</p>' if note else ""


def render_combination_page(
    site: SiteConfig,
    tool: MirrorTool,
    artifact: GeneratedArtifact,
) -> str:
    info = tool.info()
    mirror = tool.get_mirror(artifact.mirror)
    os_label = info.os_label(artifact.os_version)
    os_suffix = f" ({os_label})" if os_label else ""
    script_url = f"/{site.scripts_dir}/{artifact.filename}"
    one_click = f"curl -sSL {site.site_url}{script_url} | bash"

    parts = [
        _breadcrumb([
            ("Home", "/"),
            ("Tools", "/tools/"),
            (info.name, f"/tools/{info.key}/"),
            (mirror.name, artifact.page_path),
        ]),
        f"<h1>{_e(info.icon)} {_e(info.full_name)} - {_e(mirror.name)} mirror</h1>",
    ]
    if os_label:
        parts.append(f'<p class="subtitle">System: {_e(os_label)}</p>')
    if mirror.note:
        parts.append(_note(mirror.note))

    parts += [
        "<h2>🚀 One-click setup</h2>",
        _code_block("oneclick", one_click),
        "<h2>📝 Manual setup</h2>",
        _code_block("manual", artifact.manual_command),
    ]
    if artifact.config_file is not None:
        parts += [
            f"<h2>📄 Config file <code>{_e(info.config_file_name)}</code></h2>",
            _code_block("config", artifact.config_file),
        ]
    parts += [
        "<h2>💾 Full script</h2>",
        _code_block("script", artifact.script),
        f'<a class="btn" href="{_e(script_url)}" download>'
        "⬇️ Download script</a>",
        f'<p><a href="/tools/{_e(info.key)}/">← Choose another mirror</a></p>',
    ]

    return _layout(
        site,
        title=f"{info.full_name} {mirror.name} mirror{os_suffix} - {site.site_name}",
        description=(
            f"Configure the {mirror.name} mirror for {info.full_name}{os_suffix} "
            "with one command."
        ),
        path=artifact.page_path,
        body="\n".join(parts),
    )


# ── Generation ──────────────────────────────────────────────────────


def _page_file(out_dir: Path, path: str) -> Path:
    return out_dir.joinpath(*[p for p in path.split("/") if p], "index.html")


def generate_pages(
    out_dir: Path,
    site: SiteConfig,
    *,
    scripts_source: Path | None = None,
    tools: list[MirrorTool] | None = None,
) -> PageGenerationReport:
    """Write every page of the site.

    Args:
        out_dir: Site output root.
        site: Site settings (URL, name, scripts directory name).
        scripts_source: Directory of generated scripts to copy into
            ``out_dir/<scripts_dir>``. Skipped when ``None`` or already there.
        tools: Tools to generate for. Defaults to the whole registry.

    Raises:
        RegistryConfigError: A tool definition is malformed. Nothing is written.
    """
    tools = list_tools() if tools is None else tools
    check_registry(tools)

    report = PageGenerationReport(output_dir=str(out_dir))
    report.expected = 2 + len(tools) + sum(t.combination_count() for t in tools)

    combos = [(t, m, o) for t in tools for m, o in t.combinations()]
    report.collisions = find_collisions((t.key, m, o) for t, m, o in combos)
    blocked = colliding_combinations(report.collisions)

    def _write(path: str, render) -> None:
        try:
            write_text(_page_file(out_dir, path), render())
        except Exception as e:
            logger.error("❌ page %s: %s", path, e)
            report.failures.append({"page": path, "error": str(e)})
            return
        report.pages.append(path)

    _write("/", lambda: render_home_page(site, tools))
    _write("/tools/", lambda: render_tools_overview(site, tools))

    for tool in tools:
        _write(f"/tools/{tool.key}/", lambda tool=tool: render_tool_page(site, tool))

    for tool, mirror_key, os_version in combos:
        path = page_path(tool.key, mirror_key, os_version)
        if (tool.key, mirror_key, os_version) in blocked:
            report.failures.append({
                "page": path,
                "error": "output path collides with another combination",
            })
            continue
        _write(path, lambda t=tool, m=mirror_key, o=os_version: render_combination_page(
            site, t, build_artifact(RenderContext.build(t, m, o)),
        ))

    if scripts_source is not None:
        report.scripts_copied = copy_scripts(scripts_source, out_dir / site.scripts_dir)

    logger.info("Generated %d/%d pages in %s", report.written, report.expected, out_dir)
    return report


def copy_scripts(source: Path, target: Path) -> int:
    """Copy ``*.sh`` and ``*.json`` from ``source`` into ``target``.

    Returns the number of files copied (0 when both are the same directory).
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Scripts directory not found: {source}")
    if source.resolve() == target.resolve():
        return 0
    target.mkdir(parents=True, exist_ok=True)
    count = 0
    for path in sorted(source.iterdir()):
        if path.suffix in (".sh", ".json") and path.is_file():
            shutil.copy2(path, target / path.name)
            count += 1
    return count
