"""
Tool models — categories and the public description of a registered tool.

``ToolInfo`` is what the CLI, the web wizard and the page generator read.
Rendering itself lives on the tool classes in ``mirrorwiz.core.registry``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Navigation group of a tool."""

    SYSTEM = "system"
    LANGUAGE = "language"
    CONTAINER = "container"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]


_CATEGORY_LABELS = {
    Category.SYSTEM: "System package managers",
    Category.LANGUAGE: "Programming languages",
    Category.CONTAINER: "Containers & virtualization",
    Category.OTHER: "Other tools",
}

_CATEGORY_ICONS = {
    Category.SYSTEM: "💻",
    Category.LANGUAGE: "🔤",
    Category.CONTAINER: "🐳",
    Category.OTHER: "🧰",
}


class CategoryGroup(BaseModel):
    """Tool keys grouped under one category, in registry order."""

    key: Category
    label: str
    icon: str = ""
    tools: list[str] = Field(default_factory=list)


class ToolInfo(BaseModel):
    """Metadata about a registered tool.

    ``os_versions`` is empty unless ``requires_os_version`` is set, and is
    ordered as declared (newest release first).
    """

    key: str
    name: str
    full_name: str
    icon: str = ""
    category: Category
    description: str = ""
    official_site: str = ""
    documentation: str = ""
    platforms: list[str] = Field(default_factory=lambda: ["Windows", "macOS", "Linux"])
    requires_os_version: bool = False
    os_versions: dict[str, str] = Field(default_factory=dict)
    supports_config_file: bool = False
    config_file_name: str = ""
    mirror_count: int = 0

    def os_label(self, os_version: str | None) -> str:
        """Display label for an OS version key (empty for ``None``)."""
        if os_version is None:
            return ""
        return self.os_versions.get(os_version, os_version)
