"""
Difference report — sanity check for OS-versioned tools.

A tool that asks for an OS version should produce different scripts for
different versions. When every version yields the same script for a
mirror, the entry is flagged as a warning: the OS branch probably does
nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from mirrorwiz.core.registry.base import MirrorTool, RenderContext

logger = logging.getLogger(__name__)


@dataclass
class MirrorDiff:
    mirror: str
    differs: bool
    note: str

    @property
    def warning(self) -> bool:
        return not self.differs

    def to_dict(self) -> dict:
        return {
            "mirror": self.mirror,
            "differs": self.differs,
            "warning": self.warning,
            "note": self.note,
        }


@dataclass
class ToolDiff:
    tool: str
    os_versions: list[str]
    differences: list[MirrorDiff] = field(default_factory=list)

    @property
    def warnings(self) -> int:
        return sum(1 for d in self.differences if d.warning)

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "os_versions": self.os_versions,
            "differences": [d.to_dict() for d in self.differences],
        }


def diff_tool(tool: MirrorTool) -> ToolDiff | None:
    """Compare one tool's scripts across its OS versions.

    Returns ``None`` for tools without an OS version or with fewer than two.
    """
    versions = list(tool.os_versions()) if tool.requires_os_version else []
    if len(versions) < 2:
        return None

    report = ToolDiff(tool=tool.key, os_versions=versions)
    for mirror_key in tool.mirrors():
        scripts = {
            RenderContext.build(tool, mirror_key, v).script() for v in versions
        }
        if len(scripts) > 1:
            report.differences.append(MirrorDiff(
                mirror=mirror_key,
                differs=True,
                note="Scripts differ across OS versions (expected)",
            ))
        else:
            report.differences.append(MirrorDiff(
                mirror=mirror_key,
                differs=False,
                note="⚠️ Every OS version produces the same script (check the OS branch)",
            ))
    return report


def build_diff_report(tools: Iterable[MirrorTool]) -> list[ToolDiff]:
    """Diff every eligible tool. Tools whose rendering fails are skipped."""
    reports = []
    for tool in tools:
        try:
            report = diff_tool(tool)
        except Exception as e:
            logger.warning("Diff skipped for %s: %s", type(tool).__name__, e)
            continue
        if report is not None:
            reports.append(report)
    return reports
