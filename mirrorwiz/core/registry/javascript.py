"""
JavaScript package managers — npm, yarn, pnpm.

All three read a ``registry`` key from an rc file and accept the same
npm registry mirrors, so they share one implementation.
"""

from __future__ import annotations

from typing import ClassVar

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import ConfigFileTool, MirrorTool, index_mirrors
from mirrorwiz.core.registry.shell import GENERATOR_TAG, backup_file, compose_script


def npm_registry_mirrors() -> dict[str, Mirror]:
    return index_mirrors(
        Mirror(key="aliyun", name="Aliyun", url="https://registry.npmmirror.com"),
        Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/npm/"),
        Mirror(key="huawei", name="Huawei Cloud", url="https://mirrors.huaweicloud.com/repository/npm/"),
        Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn/npm/"),
    )


class _RegistryConfigTool(ConfigFileTool, MirrorTool):
    """A CLI that stores ``registry`` via ``<command> config set``."""

    command: ClassVar[str]
    title: ClassVar[str]
    rc_file: ClassVar[str]

    def mirrors(self) -> dict[str, Mirror]:
        return npm_registry_mirrors()

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title=self.title,
            mirror=mirror,
            backup=backup_file(self.rc_file),
            apply=[f"{self.command} config set registry {mirror.url}"],
            verify=[f"{self.command} config get registry"],
            undo=f"{self.command} config delete registry",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"{self.command} config set registry {mirror.url}"

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        name = self.rc_file.rsplit("/", 1)[-1]
        return "\n".join([
            f"# {self.title} config file ({name})",
            GENERATOR_TAG,
            f"# Location: {self.rc_file} or the project root",
            "",
            self._registry_line(mirror),
        ]) + "\n"

    def _registry_line(self, mirror: Mirror) -> str:
        return f"registry={mirror.url}"


class NpmTool(_RegistryConfigTool):
    command = "npm"
    title = "NPM"
    rc_file = "~/.npmrc"
    config_file_name = "~/.npmrc"

    def info(self) -> ToolInfo:
        return self._describe(
            key="npm",
            name="NPM",
            full_name="NPM (Node.js package manager)",
            icon="📦",
            category=Category.LANGUAGE,
            description=(
                "npm is the package manager that ships with Node.js and the "
                "client for the largest public software registry."
            ),
            official_site="https://www.npmjs.com/",
            documentation="https://docs.npmjs.com/",
        )


class YarnTool(_RegistryConfigTool):
    command = "yarn"
    title = "Yarn"
    rc_file = "~/.yarnrc"
    config_file_name = "~/.yarnrc"

    def info(self) -> ToolInfo:
        return self._describe(
            key="yarn",
            name="Yarn",
            full_name="Yarn (fast Node.js package manager)",
            icon="🧶",
            category=Category.LANGUAGE,
            description=(
                "Yarn is an alternative npm client focused on speed, offline "
                "installs and deterministic lockfiles."
            ),
            official_site="https://yarnpkg.com/",
            documentation="https://yarnpkg.com/getting-started",
        )

    def _registry_line(self, mirror: Mirror) -> str:
        return f'registry "{mirror.url}"'


class PnpmTool(_RegistryConfigTool):
    command = "pnpm"
    title = "PNPM"
    rc_file = "~/.npmrc"
    config_file_name = "~/.npmrc"

    def info(self) -> ToolInfo:
        return self._describe(
            key="pnpm",
            name="PNPM",
            full_name="PNPM (disk-efficient Node.js package manager)",
            icon="📦",
            category=Category.LANGUAGE,
            description=(
                "pnpm stores every package version once in a content-addressed "
                "store and links it into projects."
            ),
            official_site="https://pnpm.io/",
            documentation="https://pnpm.io/motivation",
        )
