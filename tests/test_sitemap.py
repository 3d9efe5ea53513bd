"""
Tests for sitemap generation.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import date

from mirrorwiz.core.registry import get_tool, list_tools
from mirrorwiz.core.services.sitemap import SITEMAP_NS, collect_urls, generate_sitemap

NS = {"sm": SITEMAP_NS}


class TestCollectUrls:
    def test_order_and_priorities(self, site):
        urls = collect_urls(site, [get_tool("npm")])
        assert urls[0].loc == "https://mirrors.test/"
        assert (urls[0].priority, urls[0].changefreq) == ("1.0", "daily")
        assert urls[1].loc == "https://mirrors.test/tools/"
        assert urls[2].loc == "https://mirrors.test/tools/npm/"
        assert urls[3].loc == "https://mirrors.test/tools/npm/aliyun/"
        assert urls[-1].loc.startswith("https://mirrors.test/scripts/npm-")
        assert urls[-1].priority == "0.5"

    def test_count(self, site):
        tools = list_tools()
        combos = sum(t.combination_count() for t in tools)
        assert len(collect_urls(site, tools)) == 2 + len(tools) + 2 * combos


class TestGenerateSitemap:
    def test_document(self, out_dir, site):
        result = generate_sitemap(out_dir, site, tools=[get_tool("apt")], lastmod=date(2024, 5, 1))

        path = out_dir / "sitemap.xml"
        assert result["path"] == str(path)
        root = ET.parse(path).getroot()
        urls = root.findall("sm:url", NS)
        assert len(urls) == result["urls"]
        assert all(u.find("sm:lastmod", NS).text == "2024-05-01" for u in urls)
        locs = [u.find("sm:loc", NS).text for u in urls]
        assert "https://mirrors.test/tools/apt/ubuntu-22.04/aliyun/" in locs
        assert "https://mirrors.test/scripts/apt-ubuntu2204-aliyun.sh" in locs

    def test_by_priority(self, out_dir, site):
        tool = get_tool("npm")
        result = generate_sitemap(out_dir, site, tools=[tool])
        n = tool.combination_count()
        assert result["by_priority"] == {"1.0": 1, "0.9": 1, "0.8": 1, "0.7": n, "0.5": n}

    def test_custom_file_name(self, out_dir):
        from mirrorwiz.core.models.site import SiteConfig

        site = SiteConfig(site_url="https://x.test/", sitemap_file="map.xml", scripts_dir="sh")
        generate_sitemap(out_dir, site, tools=[get_tool("go")])
        text = (out_dir / "map.xml").read_text()
        assert "https://x.test/sh/go-goproxy.sh" in text
        assert "https://x.test//" not in text
