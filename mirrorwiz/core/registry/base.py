"""
Tool base — abstract interface for a package manager with mirrors.

Variant model
─────────────
Every tool is a ``MirrorTool``. Two orthogonal traits refine it:

  OsVersionedTool   — rendering needs an OS version key (apt, yum).
                      Carries an ordered, non-empty ``os_versions()`` map.
  ConfigFileTool    — the tool has a standalone config file
                      (``~/.npmrc``, ``daemon.json``...). Implements
                      ``render_config_file()`` and names the target file.

Tools without ``ConfigFileTool`` inherit ``render_config_file()`` returning
``None``. Callers that hold a ``RenderContext`` never have to check the
variant themselves: the context was validated when it was built.

Render functions are pure. They take a ``Mirror`` (and an OS version key for
versioned tools) and return text; no I/O, no clock, no globals.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterator

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo


# ── Errors ──────────────────────────────────────────────────────────


class RegistryError(Exception):
    """Base class for registry errors."""


class RegistryLookupError(RegistryError):
    """Unknown tool key or unknown mirror key."""


class RenderContextError(RegistryError):
    """OS version supplied where none is accepted, or missing where required."""


class RegistryConfigError(RegistryError):
    """A registered tool definition is malformed.

    Attributes:
        tool_key: Key of the offending tool.
        problems: Every problem found for that tool.
    """

    def __init__(self, tool_key: str, problems: list[str]) -> None:
        self.tool_key = tool_key
        self.problems = problems
        super().__init__(f"Tool '{tool_key}' is misconfigured: {'; '.join(problems)}")


# ── Abstract tool ───────────────────────────────────────────────────


class MirrorTool(ABC):
    """Abstract base for registry tools.

    Tools must implement:
      - info()                  — metadata (name, category, description)
      - mirrors()               — ordered mirror map
      - render_script()         — full setup script
      - render_manual_command() — short paste-ready snippet

    Tools MAY override:
      - render_config_file()    — via the ConfigFileTool trait
    """

    requires_os_version: ClassVar[bool] = False
    supports_config_file: ClassVar[bool] = False
    config_file_name: ClassVar[str] = ""

    # ── Required methods ────────────────────────────────────────────

    @abstractmethod
    def info(self) -> ToolInfo:
        """Return tool metadata."""

    @abstractmethod
    def mirrors(self) -> dict[str, Mirror]:
        """Return the mirrors offered for this tool, keyed by mirror key."""

    @abstractmethod
    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        """Render the full, idempotent setup script."""

    @abstractmethod
    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        """Render a 1-5 line snippet that can be pasted into a terminal."""

    # ── Optional methods (with defaults) ────────────────────────────

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str | None:
        """Render the standalone config file, or ``None`` if the tool has none."""
        return None

    def os_versions(self) -> dict[str, str]:
        """OS version key → display label. Empty for unversioned tools."""
        return {}

    # ── Helpers ─────────────────────────────────────────────────────

    @property
    def key(self) -> str:
        return self.info().key

    def get_mirror(self, mirror_key: str) -> Mirror:
        """Look up one of this tool's mirrors."""
        mirror = self.mirrors().get(mirror_key)
        if mirror is None:
            raise RegistryLookupError(
                f"Unknown mirror '{mirror_key}' for tool '{self.key}'"
            )
        return mirror

    def combinations(self) -> Iterator[tuple[str, str | None]]:
        """Yield every valid ``(mirror_key, os_version)`` pair, in order.

        Mirrors are the outer loop, OS versions the inner one.
        """
        versions = list(self.os_versions()) if self.requires_os_version else [None]
        for mirror_key in self.mirrors():
            for os_version in versions:
                yield mirror_key, os_version

    def combination_count(self) -> int:
        mirrors = len(self.mirrors())
        if self.requires_os_version:
            return mirrors * len(self.os_versions())
        return mirrors

    def _describe(
        self,
        *,
        key: str,
        name: str,
        full_name: str,
        icon: str,
        category: Category,
        description: str = "",
        official_site: str = "",
        documentation: str = "",
        platforms: list[str] | None = None,
    ) -> ToolInfo:
        """Build a ToolInfo, filling the variant-derived fields."""
        extra = {"platforms": platforms} if platforms is not None else {}
        return ToolInfo(
            key=key,
            name=name,
            full_name=full_name,
            icon=icon,
            category=category,
            description=description,
            official_site=official_site,
            documentation=documentation,
            requires_os_version=self.requires_os_version,
            os_versions=self.os_versions(),
            supports_config_file=self.supports_config_file,
            config_file_name=self.config_file_name,
            mirror_count=len(self.mirrors()),
            **extra,
        )


class OsVersionedTool(MirrorTool):
    """A tool whose output depends on the target distribution release."""

    requires_os_version: ClassVar[bool] = True

    @abstractmethod
    def os_versions(self) -> dict[str, str]:
        """OS version key → display label, newest first. Must be non-empty."""


class ConfigFileTool(ABC):
    """Trait for tools with a standalone config file.

    Mix in before ``MirrorTool``::

        class NpmTool(ConfigFileTool, MirrorTool): ...
    """

    supports_config_file: ClassVar[bool] = True
    config_file_name: ClassVar[str] = ""

    @abstractmethod
    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        """Render the exact contents of the config file."""


# ── Render context ──────────────────────────────────────────────────


@dataclass(frozen=True)
class RenderContext:
    """A validated (tool, mirror, OS version) selection.

    Build it with ``RenderContext.build()``; the constructor does not
    re-check anything.
    """

    tool: MirrorTool
    mirror: Mirror
    os_version: str | None = None

    @classmethod
    def build(
        cls,
        tool: MirrorTool,
        mirror_key: str,
        os_version: str | None = None,
    ) -> RenderContext:
        mirror = tool.get_mirror(mirror_key)
        if tool.requires_os_version:
            if not os_version:
                raise RenderContextError(f"Tool '{tool.key}' requires an OS version")
            if os_version not in tool.os_versions():
                raise RenderContextError(
                    f"Unknown OS version '{os_version}' for tool '{tool.key}'. "
                    f"Choose one of: {', '.join(tool.os_versions())}"
                )
        elif os_version:
            raise RenderContextError(f"Tool '{tool.key}' does not take an OS version")
        return cls(tool=tool, mirror=mirror, os_version=os_version or None)

    def script(self) -> str:
        return self.tool.render_script(self.mirror, self.os_version)

    def manual_command(self) -> str:
        return self.tool.render_manual_command(self.mirror, self.os_version)

    def config_file(self) -> str | None:
        return self.tool.render_config_file(self.mirror, self.os_version)


# ── Definition checks ───────────────────────────────────────────────


def check_tool(tool: MirrorTool) -> list[str]:
    """Return every structural problem with a tool definition.

    An empty list means the tool is usable by the generator.
    """
    problems: list[str] = []

    try:
        info = tool.info()
    except Exception as e:
        return [f"info() failed: {e}"]

    if not info.key:
        problems.append("empty tool key")

    try:
        mirrors = tool.mirrors()
    except Exception as e:
        return problems + [f"mirrors() failed: {e}"]

    if not mirrors:
        problems.append("no mirrors defined")
    for mirror_key, mirror in mirrors.items():
        if mirror.key != mirror_key:
            problems.append(f"mirror registered as '{mirror_key}' is keyed '{mirror.key}'")

    versions = tool.os_versions()
    if tool.requires_os_version and not versions:
        problems.append("requires an OS version but declares none")
    if not tool.requires_os_version and versions:
        problems.append("declares OS versions but does not require one")

    if tool.supports_config_file and not tool.config_file_name:
        problems.append("config file capable but config_file_name is empty")

    return problems


def index_mirrors(*mirrors: Mirror) -> dict[str, Mirror]:
    """Key a sequence of mirrors by their ``key``, preserving order."""
    return {m.key: m for m in mirrors}
