"""
Script generation — render every combination to ``<out>/<scripts_dir>/``.

Flow:
  1. Pre-flight: check every tool definition (fatal on error).
  2. Resolve filenames and page paths; colliding combinations are skipped.
  3. Per combination: render → validate → write. A failing combination is
     recorded and enumeration continues.
  4. Write the manifest (index.json), test-matrix.json and, when any
     OS-versioned tool has two or more versions, diff-report.json.

Count invariant:  expected == Σ |mirrors| × max(1, |os_versions|)
                  expected == succeeded + failed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable

from mirrorwiz.core.persistence.site_files import write_json, write_text
from mirrorwiz.core.registry import (
    MirrorTool,
    RenderContext,
    build_artifact,
    check_registry,
    iter_combinations,
    list_categories,
    list_tools,
)
from mirrorwiz.core.services.diff_report import build_diff_report
from mirrorwiz.core.services.paths import (
    Collision,
    colliding_combinations,
    find_collisions,
    script_file_name,
)
from mirrorwiz.core.services.script_validate import validate_script

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"
TEST_MATRIX_FILE = "test-matrix.json"
DIFF_REPORT_FILE = "diff-report.json"


# ── Result types ────────────────────────────────────────────────────


@dataclass
class ScriptFailure:
    """One combination that produced no script."""

    tool: str
    mirror: str
    os_version: str | None
    error: str

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "mirror": self.mirror,
            "os": self.os_version,
            "error": self.error,
        }


@dataclass
class ScriptEntry:
    """Manifest entry for one written script."""

    tool: str
    mirror: str
    os_version: str | None
    category: str
    filename: str
    valid: bool
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "mirror": self.mirror,
            "os": self.os_version,
            "category": self.category,
            "filename": self.filename,
            "valid": self.valid,
            "issues": self.issues,
        }


@dataclass
class ScriptGenerationReport:
    """Summary of a script generation run."""

    output_dir: str
    expected: int = 0
    entries: list[ScriptEntry] = field(default_factory=list)
    failures: list[ScriptFailure] = field(default_factory=list)
    collisions: list[Collision] = field(default_factory=list)
    diff_warnings: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.entries)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def validated_ok(self) -> int:
        return sum(1 for e in self.entries if e.valid)

    @property
    def validation_warnings(self) -> int:
        return self.succeeded - self.validated_ok

    @property
    def ok(self) -> bool:
        return not self.failures and not self.collisions

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "output_dir": self.output_dir,
            "expected": self.expected,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "validated_ok": self.validated_ok,
            "validation_warnings": self.validation_warnings,
            "diff_warnings": self.diff_warnings,
            "failures": [f.to_dict() for f in self.failures],
            "collisions": [c.to_dict() for c in self.collisions],
        }


# ── Generation ──────────────────────────────────────────────────────


def expected_count(tools: Iterable[MirrorTool]) -> int:
    return sum(tool.combination_count() for tool in tools)


def generate_scripts(
    out_dir: Path,
    *,
    scripts_dir: str = "scripts",
    tools: list[MirrorTool] | None = None,
    generated_at: str | None = None,
) -> ScriptGenerationReport:
    """Render, validate and write every script.

    Args:
        out_dir: Site output root. Scripts land in ``out_dir/scripts_dir``.
        scripts_dir: Directory name for scripts and their JSON metadata.
        tools: Tools to generate for. Defaults to the whole registry.
        generated_at: Manifest timestamp. Defaults to now (UTC).

    Raises:
        RegistryConfigError: A tool definition is malformed. Nothing is written.
    """
    tools = list_tools() if tools is None else tools
    check_registry(tools)

    target = out_dir / scripts_dir
    target.mkdir(parents=True, exist_ok=True)

    combos = list(iter_combinations(tools))
    keyed = [(t.key, m, o) for t, m, o in combos]
    report = ScriptGenerationReport(
        output_dir=str(target),
        expected=expected_count(tools),
    )
    report.collisions = find_collisions(keyed)
    blocked = colliding_combinations(report.collisions)
    for collision in report.collisions:
        logger.error(
            "Collision on %s %s: %s",
            collision.kind, collision.target,
            ", ".join(f"{t}/{m}/{o}" for t, m, o in collision.combinations),
        )

    for tool, mirror_key, os_version in combos:
        combo = (tool.key, mirror_key, os_version)
        if combo in blocked:
            report.failures.append(ScriptFailure(
                *combo, error="output path collides with another combination",
            ))
            continue
        try:
            artifact = build_artifact(RenderContext.build(tool, mirror_key, os_version))
            if not artifact.script.strip():
                raise ValueError("rendered script is empty")
            result = validate_script(artifact.script, file=artifact.filename)
            write_text(target / artifact.filename, artifact.script)
        except Exception as e:
            logger.error("❌ %s/%s (os=%s): %s", tool.key, mirror_key, os_version, e)
            report.failures.append(ScriptFailure(*combo, error=str(e)))
            continue

        for issue in result.issues:
            logger.warning("%s: %s", artifact.filename, issue)
        report.entries.append(ScriptEntry(
            tool=artifact.tool,
            mirror=artifact.mirror,
            os_version=artifact.os_version,
            category=artifact.category.value,
            filename=artifact.filename,
            valid=result.valid,
            issues=result.issues,
        ))

    diffs = build_diff_report(tools)
    if diffs:
        report.diff_warnings = sum(d.warnings for d in diffs)
        write_json(target / DIFF_REPORT_FILE, [d.to_dict() for d in diffs])

    write_json(target / TEST_MATRIX_FILE, build_test_matrix(tools))
    write_json(target / INDEX_FILE, build_manifest(
        report, tools, generated_at or datetime.now(UTC).isoformat(),
    ))

    logger.info(
        "Generated %d/%d scripts in %s (%d with validation warnings)",
        report.succeeded, report.expected, target, report.validation_warnings,
    )
    return report


def build_manifest(
    report: ScriptGenerationReport,
    tools: list[MirrorTool],
    generated_at: str,
) -> dict:
    """The index.json document for a generation run."""
    mirror_keys = {m for t in tools for m in t.mirrors()}
    return {
        "generated_at": generated_at,
        "total_scripts": report.succeeded,
        "total_tools": len(tools),
        "total_mirrors": len(mirror_keys),
        "categories": [g.key.value for g in list_categories(tools)],
        "scripts": [e.to_dict() for e in report.entries],
        "validation": {
            "total": report.succeeded,
            "valid": report.validated_ok,
            "issues": report.validation_warnings,
        },
        "failures": [f.to_dict() for f in report.failures],
    }


def build_test_matrix(tools: list[MirrorTool]) -> list[dict]:
    """One row per combination, for driving install tests in containers."""
    matrix = []
    for tool in tools:
        info = tool.info()
        mirrors = tool.mirrors()
        for mirror_key, os_version in tool.combinations():
            mirror = mirrors[mirror_key]
            os_name = info.os_label(os_version) or "All"
            matrix.append({
                "tool": tool.key,
                "tool_name": info.name,
                "mirror": mirror_key,
                "mirror_name": mirror.name,
                "os": os_version,
                "os_name": os_name,
                "script_file": script_file_name(tool.key, mirror_key, os_version),
                "category": info.category.value,
            })
    return matrix
