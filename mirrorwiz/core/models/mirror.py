"""
Mirror model — one regional download endpoint offered for a tool.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def url_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for an absolute URL, or ``""``."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


class Mirror(BaseModel):
    """A mirror endpoint.

    Attributes:
        key:      Mirror key, unique within its tool (``aliyun``).
        name:     Display name.
        url:      Base URL used in generated commands.
        test_url: URL probed for latency. Defaults to the origin of ``url``.
        note:     Optional caveat shown next to the mirror.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    url: str
    test_url: str = ""
    note: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_test_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("test_url"):
            origin = url_origin(str(data.get("url", "")))
            if origin:
                data = {**data, "test_url": origin}
        return data

    @field_validator("url", "test_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value

    @property
    def host(self) -> str:
        """Host part of ``url`` (``mirrors.aliyun.com``)."""
        return urlsplit(self.url).netloc

    @property
    def base(self) -> str:
        """``url`` without a trailing slash, for path concatenation."""
        return self.url.rstrip("/")
