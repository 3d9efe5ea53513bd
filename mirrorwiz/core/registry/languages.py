"""
Language package managers — pip, composer, go, rubygems, cargo.
"""

from __future__ import annotations

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import ConfigFileTool, MirrorTool, index_mirrors
from mirrorwiz.core.registry.shell import (
    GENERATOR_TAG,
    backup_file,
    compose_script,
    heredoc,
)

# ═══════════════════════════════════════════════════════════════════
#  pip
# ═══════════════════════════════════════════════════════════════════

_PIP_CONF = "~/.config/pip/pip.conf"


class PipTool(ConfigFileTool, MirrorTool):
    config_file_name = "~/.config/pip/pip.conf (Windows: %APPDATA%\\pip\\pip.ini)"

    def info(self) -> ToolInfo:
        return self._describe(
            key="pip",
            name="PIP",
            full_name="PIP (Python package manager)",
            icon="🐍",
            category=Category.LANGUAGE,
            description=(
                "pip installs Python packages from the Python Package Index. A "
                "nearby index mirror avoids the timeouts common on slow links."
            ),
            official_site="https://pip.pypa.io/",
            documentation="https://pip.pypa.io/en/stable/user_guide/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com/pypi/simple/"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/pypi/simple/"),
            Mirror(key="tsinghua", name="Tsinghua University", url="https://pypi.tuna.tsinghua.edu.cn/simple"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="PIP",
            mirror=mirror,
            backup=backup_file(_PIP_CONF),
            apply=[
                f"pip config set global.index-url {mirror.url}",
                f"pip config set global.trusted-host {mirror.host}",
            ],
            verify=["pip config get global.index-url"],
            undo="pip config unset global.index-url && pip config unset global.trusted-host",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"pip config set global.index-url {mirror.url}"

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "# PIP config file",
            GENERATOR_TAG,
            "# Linux/macOS: ~/.config/pip/pip.conf",
            "# Windows: %APPDATA%\\pip\\pip.ini",
            "",
            "[global]",
            f"index-url = {mirror.url}",
            f"trusted-host = {mirror.host}",
        ]) + "\n"


# ═══════════════════════════════════════════════════════════════════
#  Composer
# ═══════════════════════════════════════════════════════════════════


class ComposerTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="composer",
            name="Composer",
            full_name="Composer (PHP package manager)",
            icon="🐘",
            category=Category.LANGUAGE,
            description="Composer manages PHP dependencies published on Packagist.",
            official_site="https://getcomposer.org/",
            documentation="https://getcomposer.org/doc/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com/composer/"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/composer/"),
            Mirror(key="huawei", name="Huawei Cloud", url="https://mirrors.huaweicloud.com/repository/php/"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Composer",
            mirror=mirror,
            backup=[
                'COMPOSER_CONFIG="$(composer config -g home)/config.json"',
                *backup_file('"$COMPOSER_CONFIG"', label="global composer config"),
            ],
            apply=[f"composer config -g repo.packagist composer {mirror.url}"],
            verify=["composer config -g repo.packagist"],
            undo="composer config -g --unset repos.packagist",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"composer config -g repo.packagist composer {mirror.url}"


# ═══════════════════════════════════════════════════════════════════
#  Go modules
# ═══════════════════════════════════════════════════════════════════


class GoTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="go",
            name="Go",
            full_name="Go Modules (Go package manager)",
            icon="🐹",
            category=Category.LANGUAGE,
            description=(
                "Go modules download dependencies through the proxy named by "
                "GOPROXY."
            ),
            official_site="https://go.dev/",
            documentation="https://go.dev/doc/modules/managing-dependencies",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com/goproxy/",
                   test_url="https://mirrors.aliyun.com"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/go/",
                   test_url="https://mirrors.cloud.tencent.com"),
            Mirror(key="goproxy", name="Goproxy.cn", url="https://goproxy.cn,direct",
                   test_url="https://goproxy.cn"),
            Mirror(key="goproxyio", name="Goproxy.io", url="https://goproxy.io,direct",
                   test_url="https://goproxy.io"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Go Modules",
            mirror=mirror,
            backup=[
                'GOENV_FILE="$(go env GOENV)"',
                *backup_file('"$GOENV_FILE"', label="go env file"),
            ],
            apply=[
                f"go env -w GOPROXY={mirror.url}",
                "# Private modules can bypass the proxy:",
                "# go env -w GOPRIVATE=*.corp.example.com",
            ],
            verify=["go env GOPROXY"],
            undo="go env -u GOPROXY",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"go env -w GOPROXY={mirror.url}"


# ═══════════════════════════════════════════════════════════════════
#  RubyGems
# ═══════════════════════════════════════════════════════════════════

_RUBYGEMS_OFFICIAL = "https://rubygems.org/"


class RubyGemsTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="rubygems",
            name="RubyGems",
            full_name="RubyGems (Ruby package manager)",
            icon="💎",
            category=Category.LANGUAGE,
            description="RubyGems distributes Ruby libraries and tools as gems.",
            official_site="https://rubygems.org/",
            documentation="https://guides.rubygems.org/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn/rubygems/"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/rubygems/"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn/rubygems/"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="RubyGems",
            mirror=mirror,
            backup=backup_file("~/.gemrc"),
            apply=[
                f"gem sources --remove {_RUBYGEMS_OFFICIAL} >/dev/null 2>&1 || true",
                f"gem sources -l | grep -qxF {mirror.url} || gem sources --add {mirror.url}",
                "gem sources -c",
            ],
            verify=["gem sources -l"],
            undo=f"gem sources --add {_RUBYGEMS_OFFICIAL} --remove {mirror.url}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"gem sources --add {mirror.url} --remove {_RUBYGEMS_OFFICIAL}"


# ═══════════════════════════════════════════════════════════════════
#  Cargo
# ═══════════════════════════════════════════════════════════════════

_CARGO_CONFIG = "~/.cargo/config.toml"


def render_cargo_config(mirror: Mirror) -> str:
    """Source replacement for crates.io.

    rsproxy publishes its own registry entry and needs git fetched through
    the CLI; the other mirrors are plain index replacements.
    """
    if mirror.key == "rsproxy":
        return "\n".join([
            "[source.crates-io]",
            "replace-with = 'rsproxy'",
            "",
            "[source.rsproxy]",
            f'registry = "{mirror.url}"',
            "",
            "[registries.rsproxy]",
            f'index = "{mirror.url}"',
            "",
            "[net]",
            "git-fetch-with-cli = true",
        ])
    return "\n".join([
        "[source.crates-io]",
        "replace-with = 'mirror'",
        "",
        "[source.mirror]",
        f'registry = "{mirror.url}"',
    ])


class CargoTool(ConfigFileTool, MirrorTool):
    config_file_name = _CARGO_CONFIG

    def info(self) -> ToolInfo:
        return self._describe(
            key="cargo",
            name="Cargo",
            full_name="Cargo (Rust package manager)",
            icon="🦀",
            category=Category.LANGUAGE,
            description="Cargo builds Rust projects and fetches crates from crates.io.",
            official_site="https://doc.rust-lang.org/cargo/",
            documentation="https://doc.rust-lang.org/cargo/reference/source-replacement.html",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University",
                   url="https://mirrors.tuna.tsinghua.edu.cn/git/crates.io-index.git",
                   test_url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn/crates.io-index/",
                   test_url="https://mirrors.ustc.edu.cn"),
            Mirror(key="sjtu", name="SJTU", url="https://mirrors.sjtug.sjtu.edu.cn/git/crates.io-index/",
                   test_url="https://mirrors.sjtug.sjtu.edu.cn"),
            Mirror(key="rsproxy", name="RsProxy (ByteDance)", url="https://rsproxy.cn/crates.io-index",
                   test_url="https://rsproxy.cn"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Cargo",
            mirror=mirror,
            backup=["mkdir -p ~/.cargo", *backup_file(_CARGO_CONFIG)],
            apply=heredoc(_CARGO_CONFIG, render_cargo_config(mirror)),
            verify=[f"cat {_CARGO_CONFIG}", "# Try it: cargo search serde"],
            undo=f"cp {_CARGO_CONFIG}.backup.<timestamp> {_CARGO_CONFIG}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        replace_with = "rsproxy" if mirror.key == "rsproxy" else "mirror"
        return "\n".join([
            "mkdir -p ~/.cargo",
            f"printf '[source.crates-io]\\nreplace-with = \"{replace_with}\"\\n\\n"
            f"[source.{replace_with}]\\nregistry = \"{mirror.url}\"\\n' >> {_CARGO_CONFIG}",
        ])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "# Cargo config file (config.toml)",
            GENERATOR_TAG,
            f"# Location: {_CARGO_CONFIG}",
            "",
            render_cargo_config(mirror),
        ]) + "\n"
