"""
Mirror registry — every supported package manager and its mirrors.

Registry of all tools, in the order they appear on the site. Import
this module to get access to the lookup functions:

    from mirrorwiz.core.registry import get_tool, render_artifact

    artifact = render_artifact("npm", "aliyun")
    artifact.manual_command
    # 'npm config set registry https://registry.npmmirror.com'
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from mirrorwiz.core.models.artifact import GeneratedArtifact
from mirrorwiz.core.models.tool import Category, CategoryGroup
from mirrorwiz.core.registry.base import (
    ConfigFileTool,
    MirrorTool,
    OsVersionedTool,
    RegistryConfigError,
    RegistryError,
    RegistryLookupError,
    RenderContext,
    RenderContextError,
    check_tool,
)
from mirrorwiz.core.registry.container import DockerTool
from mirrorwiz.core.registry.javascript import NpmTool, PnpmTool, YarnTool
from mirrorwiz.core.registry.jvm import GradleTool, MavenTool
from mirrorwiz.core.registry.languages import (
    CargoTool,
    ComposerTool,
    GoTool,
    PipTool,
    RubyGemsTool,
)
from mirrorwiz.core.registry.other import (
    CondaTool,
    CpanTool,
    CranTool,
    FlutterTool,
    NuGetTool,
)
from mirrorwiz.core.registry.system import AptTool, HomebrewTool, YumTool
from mirrorwiz.core.services.paths import page_path, script_file_name

logger = logging.getLogger(__name__)

# ── Tool registry ───────────────────────────────────────────────────

_TOOLS: dict[str, MirrorTool] = {}

_DEFAULT_TOOLS: tuple[type[MirrorTool], ...] = (
    AptTool, YumTool, HomebrewTool,
    NpmTool, YarnTool, PnpmTool, PipTool, ComposerTool, MavenTool,
    GoTool, RubyGemsTool, CargoTool, GradleTool,
    DockerTool,
    NuGetTool, CondaTool, FlutterTool, CpanTool, CranTool,
)


def _register_defaults() -> None:
    """Register all built-in tools."""
    for cls in _DEFAULT_TOOLS:
        tool = cls()
        _TOOLS[tool.key] = tool


def _registry() -> dict[str, MirrorTool]:
    if not _TOOLS:
        _register_defaults()
    return _TOOLS


def get_tool(key: str) -> MirrorTool:
    """Get a tool by key.

    Raises:
        RegistryLookupError: No tool is registered under ``key``.
    """
    tool = _registry().get(key)
    if tool is None:
        raise RegistryLookupError(
            f"Unknown tool '{key}'. Available: {', '.join(_registry())}"
        )
    return tool


def list_tools() -> list[MirrorTool]:
    """All tools in registration order."""
    return list(_registry().values())


def tool_keys() -> list[str]:
    return list(_registry())


def list_categories(tools: Iterable[MirrorTool] | None = None) -> list[CategoryGroup]:
    """Group tools by category, in category declaration order.

    Categories with no tools are omitted.
    """
    tools = list_tools() if tools is None else list(tools)
    groups: list[CategoryGroup] = []
    for category in Category:
        keys = [t.key for t in tools if t.info().category == category]
        if keys:
            groups.append(CategoryGroup(
                key=category, label=category.label, icon=category.icon, tools=keys,
            ))
    return groups


def iter_combinations(
    tools: Iterable[MirrorTool] | None = None,
) -> Iterator[tuple[MirrorTool, str, str | None]]:
    """Yield ``(tool, mirror_key, os_version)`` for every valid selection.

    Order: tools in registration order, then mirrors, then OS versions.
    """
    for tool in list_tools() if tools is None else tools:
        for mirror_key, os_version in tool.combinations():
            yield tool, mirror_key, os_version


def check_registry(tools: Iterable[MirrorTool] | None = None) -> None:
    """Check every tool definition.

    Raises:
        RegistryConfigError: For the first tool with problems.
    """
    seen: set[str] = set()
    for tool in list_tools() if tools is None else tools:
        problems = check_tool(tool)
        key = _safe_key(tool)
        if key in seen:
            problems.append(f"duplicate tool key '{key}'")
        seen.add(key)
        if problems:
            raise RegistryConfigError(key, problems)


def _safe_key(tool: MirrorTool) -> str:
    try:
        return tool.key or type(tool).__name__
    except Exception:
        return type(tool).__name__


def build_artifact(context: RenderContext) -> GeneratedArtifact:
    """Render every output for a validated selection."""
    tool, mirror, os_version = context.tool, context.mirror, context.os_version
    return GeneratedArtifact(
        tool=tool.key,
        mirror=mirror.key,
        os_version=os_version,
        category=tool.info().category,
        script=context.script(),
        manual_command=context.manual_command(),
        config_file=context.config_file(),
        filename=script_file_name(tool.key, mirror.key, os_version),
        page_path=page_path(tool.key, mirror.key, os_version),
    )


def render_artifact(
    tool_key: str,
    mirror_key: str,
    os_version: str | None = None,
) -> GeneratedArtifact:
    """Look up a selection and render it.

    Raises:
        RegistryLookupError: Unknown tool or mirror.
        RenderContextError: OS version missing, unknown or not accepted.
    """
    context = RenderContext.build(get_tool(tool_key), mirror_key, os_version)
    logger.debug("Rendering %s/%s (os=%s)", tool_key, mirror_key, os_version)
    return build_artifact(context)


__all__ = [
    "ConfigFileTool",
    "MirrorTool",
    "OsVersionedTool",
    "RegistryConfigError",
    "RegistryError",
    "RegistryLookupError",
    "RenderContext",
    "RenderContextError",
    "build_artifact",
    "check_registry",
    "check_tool",
    "get_tool",
    "iter_combinations",
    "list_categories",
    "list_tools",
    "render_artifact",
    "tool_keys",
]
