"""
Filename/path resolver — where each combination lands on disk and on the site.

  script file   {tool}-{mirror}.sh             (no OS version)
                {tool}-{os}-{mirror}.sh        (OS key with '.' and '-' removed)
  page path     /tools/{tool}/{mirror}/
                /tools/{tool}/{os_version}/{mirror}/

Normalizing OS keys is lossy (``ubuntu-22.04`` and ``ubuntu-2-204`` both
become ``ubuntu2204``), so the generator runs ``find_collisions()`` first
and refuses to write colliding outputs.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable


def normalize_os_version(os_version: str) -> str:
    """Strip ``.`` and ``-`` from an OS version key."""
    return os_version.replace(".", "").replace("-", "")


def script_file_name(tool: str, mirror: str, os_version: str | None = None) -> str:
    if os_version:
        return f"{tool}-{normalize_os_version(os_version)}-{mirror}.sh"
    return f"{tool}-{mirror}.sh"


def page_path(tool: str, mirror: str, os_version: str | None = None) -> str:
    if os_version:
        return f"/tools/{tool}/{os_version}/{mirror}/"
    return f"/tools/{tool}/{mirror}/"


# ── Collision detection ─────────────────────────────────────────────


@dataclass
class Collision:
    """Two or more combinations resolving to the same output.

    Attributes:
        kind:         ``"filename"`` or ``"page_path"``.
        target:       The shared filename or page path.
        combinations: The ``(tool, mirror, os_version)`` triples involved.
    """

    kind: str
    target: str
    combinations: list[tuple[str, str, str | None]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "target": self.target,
            "combinations": [
                {"tool": t, "mirror": m, "os": o} for t, m, o in self.combinations
            ],
        }


def find_collisions(
    combinations: Iterable[tuple[str, str, str | None]],
) -> list[Collision]:
    """Group combinations by filename and page path; report every shared target."""
    by_file: dict[str, list] = defaultdict(list)
    by_page: dict[str, list] = defaultdict(list)
    for combo in combinations:
        tool, mirror, os_version = combo
        by_file[script_file_name(tool, mirror, os_version)].append(combo)
        by_page[page_path(tool, mirror, os_version)].append(combo)

    collisions = []
    for kind, groups in (("filename", by_file), ("page_path", by_page)):
        for target, combos in groups.items():
            if len(combos) > 1:
                collisions.append(Collision(kind=kind, target=target, combinations=combos))
    return collisions


def colliding_combinations(
    collisions: Iterable[Collision],
) -> set[tuple[str, str, str | None]]:
    """Every combination involved in at least one collision."""
    return {combo for c in collisions for combo in c.combinations}
