"""
Sitemap — sitemaps.org 0.9 document for the generated site.

  page                 priority  changefreq
  home                 1.0       daily
  tools overview       0.9       weekly
  tool page            0.8       weekly
  combination page     0.7       monthly
  script file          0.5       monthly
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from xml.sax.saxutils import escape

from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.persistence.site_files import write_text
from mirrorwiz.core.registry import MirrorTool, list_tools
from mirrorwiz.core.services.paths import page_path, script_file_name

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass(frozen=True)
class SitemapUrl:
    loc: str
    priority: str
    changefreq: str


def collect_urls(site: SiteConfig, tools: list[MirrorTool]) -> list[SitemapUrl]:
    """Every URL of the site, in sitemap order."""
    base = site.site_url
    urls = [
        SitemapUrl(f"{base}/", "1.0", "daily"),
        SitemapUrl(f"{base}/tools/", "0.9", "weekly"),
    ]
    for tool in tools:
        urls.append(SitemapUrl(f"{base}/tools/{tool.key}/", "0.8", "weekly"))
    for tool in tools:
        for mirror_key, os_version in tool.combinations():
            urls.append(SitemapUrl(
                base + page_path(tool.key, mirror_key, os_version), "0.7", "monthly",
            ))
    for tool in tools:
        for mirror_key, os_version in tool.combinations():
            filename = script_file_name(tool.key, mirror_key, os_version)
            urls.append(SitemapUrl(
                f"{base}/{site.scripts_dir}/{filename}", "0.5", "monthly",
            ))
    return urls


def render_sitemap(urls: list[SitemapUrl], lastmod: date) -> str:
    stamp = lastmod.isoformat()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NS}">',
    ]
    for url in urls:
        lines += [
            "  <url>",
            f"    <loc>{escape(url.loc)}</loc>",
            f"    <lastmod>{stamp}</lastmod>",
            f"    <changefreq>{url.changefreq}</changefreq>",
            f"    <priority>{url.priority}</priority>",
            "  </url>",
        ]
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def generate_sitemap(
    out_dir: Path,
    site: SiteConfig,
    *,
    tools: list[MirrorTool] | None = None,
    lastmod: date | None = None,
) -> dict:
    """Write ``out_dir/<sitemap_file>``.

    Returns:
        {"path": str, "urls": int, "by_priority": {priority: count}}
    """
    tools = list_tools() if tools is None else tools
    urls = collect_urls(site, tools)
    path = out_dir / site.sitemap_file
    write_text(path, render_sitemap(urls, lastmod or date.today()))

    by_priority: dict[str, int] = {}
    for url in urls:
        by_priority[url.priority] = by_priority.get(url.priority, 0) + 1
    logger.info("Sitemap: %d URLs → %s", len(urls), path)
    return {"path": str(path), "urls": len(urls), "by_priority": by_priority}
