"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import MirrorTool, OsVersionedTool, index_mirrors
from mirrorwiz.core.registry.shell import compose_script

# ═══════════════════════════════════════════════════════════════════
#  Fake tools
# ═══════════════════════════════════════════════════════════════════


class FlakyTool(MirrorTool):
    """Renders fine for every mirror except ``broken``."""

    def info(self) -> ToolInfo:
        return self._describe(
            key="flaky", name="Flaky", full_name="Flaky test tool",
            icon="🧪", category=Category.OTHER,
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="good", name="Good", url="https://good.example.com/"),
            Mirror(key="broken", name="Broken", url="https://broken.example.com/"),
            Mirror(key="fine", name="Fine", url="https://fine.example.com/"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        if mirror.key == "broken":
            raise RuntimeError("template exploded")
        return compose_script(
            title="Flaky", mirror=mirror,
            apply=[f"flaky set {mirror.url}"], verify=["flaky get"], undo="flaky reset",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"flaky set {mirror.url}"


class CollidingTool(OsVersionedTool):
    """Two OS keys that normalize to the same filename segment."""

    def info(self) -> ToolInfo:
        return self._describe(
            key="clash", name="Clash", full_name="Colliding test tool",
            icon="💥", category=Category.SYSTEM,
        )

    def os_versions(self) -> dict[str, str]:
        return {"ubuntu-22.04": "Ubuntu 22.04", "ubuntu-2-204": "Ubuntu 2.204", "debian-12": "Debian 12"}

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(Mirror(key="m1", name="M1", url="https://m1.example.com/"))

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Clash", mirror=mirror, os_label=os_version or "",
            apply=[f"clash use {mirror.url} {os_version}"], verify=["clash show"], undo="clash reset",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"clash use {mirror.url} {os_version}"


class NoMirrorsTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="empty", name="Empty", full_name="Tool without mirrors",
            icon="", category=Category.OTHER,
        )

    def mirrors(self) -> dict[str, Mirror]:
        return {}

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return ""

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return ""


# ═══════════════════════════════════════════════════════════════════
#  Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def site() -> SiteConfig:
    return SiteConfig(site_url="https://mirrors.test", site_name="Test Mirrors")


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "dist"
    d.mkdir()
    return d


@pytest.fixture
def flaky_tool() -> FlakyTool:
    return FlakyTool()


@pytest.fixture
def colliding_tool() -> CollidingTool:
    return CollidingTool()


@pytest.fixture
def empty_tool() -> NoMirrorsTool:
    return NoMirrorsTool()


class FakeResponse:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """``urlopen`` stand-in. ``outcomes`` maps host → list of results per call.

    A result is ``"ok"`` or an exception instance to raise.
    """

    def __init__(self, outcomes: dict[str, list]):
        self.outcomes = {host: list(results) for host, results in outcomes.items()}
        self.requests: list = []

    def __call__(self, req, timeout=None):
        self.requests.append((req, timeout))
        host = req.host
        results = self.outcomes.get(host) or ["ok"]
        outcome = results.pop(0) if len(results) > 1 else results[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return FakeResponse()


@pytest.fixture
def fake_opener():
    return FakeOpener
