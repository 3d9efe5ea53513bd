"""
JVM build tools — Maven and Gradle.

Both pull from Maven repositories, so they share the mirror list.
"""

from __future__ import annotations

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import ConfigFileTool, MirrorTool, index_mirrors
from mirrorwiz.core.registry.shell import backup_file, compose_script, heredoc


def maven_mirrors() -> dict[str, Mirror]:
    return index_mirrors(
        Mirror(key="aliyun", name="Aliyun", url="https://maven.aliyun.com/repository/public"),
        Mirror(key="tencent", name="Tencent Cloud",
               url="https://mirrors.cloud.tencent.com/nexus/repository/maven-public/"),
        Mirror(key="huawei", name="Huawei Cloud", url="https://mirrors.huaweicloud.com/repository/maven/"),
    )


# ═══════════════════════════════════════════════════════════════════
#  Maven
# ═══════════════════════════════════════════════════════════════════

_SETTINGS_XML = "~/.m2/settings.xml"


def render_settings_xml(mirror: Mirror) -> str:
    return "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0"',
        '          xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
        '          xsi:schemaLocation="http://maven.apache.org/SETTINGS/1.0.0',
        '          http://maven.apache.org/xsd/settings-1.0.0.xsd">',
        "  <mirrors>",
        "    <mirror>",
        f"      <id>{mirror.key}</id>",
        f"      <name>{mirror.name} Maven Mirror</name>",
        f"      <url>{mirror.url}</url>",
        "      <mirrorOf>central</mirrorOf>",
        "    </mirror>",
        "  </mirrors>",
        "</settings>",
    ])


class MavenTool(ConfigFileTool, MirrorTool):
    config_file_name = _SETTINGS_XML

    def info(self) -> ToolInfo:
        return self._describe(
            key="maven",
            name="Maven",
            full_name="Maven (Java build and dependency manager)",
            icon="☕",
            category=Category.LANGUAGE,
            description=(
                "Apache Maven builds Java projects and downloads their "
                "dependencies from Maven Central."
            ),
            official_site="https://maven.apache.org/",
            documentation="https://maven.apache.org/guides/mini/guide-mirror-settings.html",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return maven_mirrors()

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Maven",
            mirror=mirror,
            backup=["mkdir -p ~/.m2", *backup_file(_SETTINGS_XML)],
            apply=heredoc(_SETTINGS_XML, render_settings_xml(mirror)),
            verify=[f"grep -A 1 '<mirror>' {_SETTINGS_XML}"],
            undo=f"cp {_SETTINGS_XML}.backup.<timestamp> {_SETTINGS_XML}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            f"# Add inside <mirrors> in {_SETTINGS_XML}:",
            f"<mirror><id>{mirror.key}</id><mirrorOf>central</mirrorOf><url>{mirror.url}</url></mirror>",
        ])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        lines = render_settings_xml(mirror).split("\n")
        header = [
            "<!-- Maven config file (settings.xml) -->",
            "<!-- Generated by Mirror Wizard -->",
            f"<!-- Location: {_SETTINGS_XML} -->",
        ]
        return "\n".join([lines[0], *header, *lines[1:]]) + "\n"


# ═══════════════════════════════════════════════════════════════════
#  Gradle
# ═══════════════════════════════════════════════════════════════════

_INIT_SCRIPT = "~/.gradle/init.d/mirror.gradle"


def render_init_script(mirror: Mirror) -> str:
    """A Gradle init script that puts the mirror first for every build."""
    return "\n".join([
        "allprojects {",
        "    buildscript {",
        "        repositories {",
        f"            maven {{ url '{mirror.url}' }}",
        "        }",
        "    }",
        "    repositories {",
        f"        maven {{ url '{mirror.url}' }}",
        "    }",
        "}",
    ])


class GradleTool(ConfigFileTool, MirrorTool):
    config_file_name = _INIT_SCRIPT

    def info(self) -> ToolInfo:
        return self._describe(
            key="gradle",
            name="Gradle",
            full_name="Gradle (Android/Java build tool)",
            icon="🐘",
            category=Category.LANGUAGE,
            description=(
                "Gradle builds JVM and Android projects. An init script applies "
                "the mirror to every build on the machine."
            ),
            official_site="https://gradle.org/",
            documentation="https://docs.gradle.org/current/userguide/init_scripts.html",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return maven_mirrors()

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Gradle",
            mirror=mirror,
            backup=["mkdir -p ~/.gradle/init.d", *backup_file(_INIT_SCRIPT)],
            apply=heredoc(_INIT_SCRIPT, render_init_script(mirror)),
            verify=[f"cat {_INIT_SCRIPT}"],
            undo=f"rm {_INIT_SCRIPT}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "mkdir -p ~/.gradle/init.d",
            f"printf \"allprojects {{ repositories {{ maven {{ url '%s' }} }} }}\\n\" '{mirror.url}' > {_INIT_SCRIPT}",
        ])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            f"// Gradle init script - {mirror.name} mirror",
            "// Generated by Mirror Wizard",
            f"// Location: {_INIT_SCRIPT}",
            "",
            render_init_script(mirror),
        ]) + "\n"
