"""
Site model — generator settings loaded from mirrorwiz.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator


class SiteConfig(BaseModel):
    """Settings for the static site build.

    Every field has a default, so a missing mirrorwiz.yml is valid.
    """

    site_url: str = "https://mirror.example.com"
    site_name: str = "Mirror Wizard"
    output_dir: str = "dist"
    scripts_dir: str = "scripts"
    sitemap_file: str = "sitemap.xml"

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"site_url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")
