"""
Script validation — static, advisory checks on generated setup scripts.

Rules:
  1. The first line is a ``#!/bin/bash`` or ``#!/bin/sh`` shebang.
  2. At least one non-empty ``echo``/``printf`` line tells the user what
     is happening.
  3. Destructive or system-path commands run under ``sudo``:
     recursive ``rm`` (``-r``, ``-R``, ``--recursive``), ``mv``/``cp`` touching
     /etc, ``tee /etc/...``, ``> /etc/...``.
     One issue per offending line. Comment lines and lines that only print
     quoted text (no ``;``, ``&&``, ``|`` after the string) are skipped.

Results never block generation; they are reported next to the script.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_SHEBANGS = ("#!/bin/bash", "#!/bin/sh")

_STATUS_RE = re.compile(r"""^\s*(?:echo|printf)\s+(?:-[a-zA-Z]+\s+)*(?!""\s*$|''\s*$)\S""")

# (label, pattern), matched per line
_PRIVILEGED = [
    ("rm -r", re.compile(r"\brm\s+(?:-\S+\s+)*(?:-[a-zA-Z]*[rR][a-zA-Z]*|--recursive)\b")),
    ("mv /etc", re.compile(r"\bmv\s+(?:.*\s)?/etc(?:/|\b)")),
    ("cp /etc", re.compile(r"\bcp\s+(?:.*\s)?/etc(?:/|\b)")),
    ("tee /etc", re.compile(r"\btee\s+(?:-a\s+)?/etc(?:/|\b)")),
    ("> /etc", re.compile(r">>?\s*/etc/")),
]

_SUDO_RE = re.compile(r"\bsudo\b")
_QUOTED = r"""(?:"(?:[^"\\]|\\.)*"|'[^']*')"""
_PRINT_ONLY_RE = re.compile(
    rf"^\s*(?:echo|printf)\s+(?:-[a-zA-Z]+\s+)*{_QUOTED}(?:\s+{_QUOTED})*\s*$"
)


@dataclass
class ValidationResult:
    """Outcome of validating one script.

    ``valid`` is True when ``issues`` is empty.
    """

    issues: list[str] = field(default_factory=list)
    file: str = ""

    @property
    def valid(self) -> bool:
        return not self.issues

    def to_dict(self) -> dict:
        d: dict = {"valid": self.valid, "issues": list(self.issues)}
        if self.file:
            d["file"] = self.file
        return d


def validate_script(body: str, *, file: str = "") -> ValidationResult:
    """Run every rule against a script body."""
    result = ValidationResult(file=file)
    lines = body.splitlines()

    # Rule 1: shebang
    first = lines[0].strip() if lines else ""
    if not first.startswith(_SHEBANGS):
        result.issues.append("Missing shebang (#!/bin/bash)")

    # Rule 2: status output
    if not any(_STATUS_RE.match(line) for line in lines):
        result.issues.append("No echo/printf status message for the user")

    # Rule 3: privileged commands
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or _PRINT_ONLY_RE.match(stripped):
            continue
        if _SUDO_RE.search(stripped):
            continue
        for label, pattern in _PRIVILEGED:
            if pattern.search(stripped):
                result.issues.append(f"Line {lineno}: '{label}' without sudo: {stripped}")
                break

    return result


# ── Directory validation ────────────────────────────────────────────


@dataclass
class DirectoryValidation:
    """Validation results for every ``*.sh`` file in a directory."""

    directory: str
    results: list[ValidationResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def valid(self) -> int:
        return sum(1 for r in self.results if r.valid)

    @property
    def with_issues(self) -> int:
        return self.total - self.valid

    def to_dict(self) -> dict:
        return {
            "directory": self.directory,
            "total": self.total,
            "valid": self.valid,
            "issues": self.with_issues,
            "results": [r.to_dict() for r in self.results],
        }


def validate_directory(directory: Path) -> DirectoryValidation:
    """Validate every ``*.sh`` file in ``directory`` (not recursive), by name.

    Raises:
        FileNotFoundError: ``directory`` does not exist.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Not a directory: {directory}")

    report = DirectoryValidation(directory=str(directory))
    for path in sorted(directory.glob("*.sh")):
        body = path.read_text(encoding="utf-8")
        result = validate_script(body, file=path.name)
        if not result.valid:
            logger.info("%s: %d issue(s)", path.name, len(result.issues))
        report.results.append(result)
    return report
