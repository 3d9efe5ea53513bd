"""
Other ecosystems — NuGet, Conda, Flutter, CPAN, CRAN.
"""

from __future__ import annotations

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import ConfigFileTool, MirrorTool, index_mirrors
from mirrorwiz.core.registry.shell import (
    GENERATOR_TAG,
    append_once,
    backup_file,
    compose_script,
    heredoc,
)


class NuGetTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="nuget",
            name="NuGet",
            full_name="NuGet (.NET package manager)",
            icon="📘",
            category=Category.OTHER,
            description="NuGet distributes .NET libraries consumed by dotnet and Visual Studio.",
            official_site="https://www.nuget.org/",
            documentation="https://learn.microsoft.com/nuget/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="huawei", name="Huawei Cloud",
                   url="https://mirrors.huaweicloud.com/repository/nuget/v3/index.json"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com/nuget/"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        source = f"mirrorwiz-{mirror.key}"
        return compose_script(
            title="NuGet",
            mirror=mirror,
            backup=backup_file("~/.nuget/NuGet/NuGet.Config"),
            apply=[
                f"dotnet nuget remove source {source} >/dev/null 2>&1 || true",
                f"dotnet nuget add source {mirror.url} -n {source}",
                "# nuget.org stays enabled as a fallback",
            ],
            verify=["dotnet nuget list source"],
            undo=f"dotnet nuget remove source {source}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"dotnet nuget add source {mirror.url} -n mirrorwiz-{mirror.key}"


# ═══════════════════════════════════════════════════════════════════
#  Conda
# ═══════════════════════════════════════════════════════════════════

_CONDARC = "~/.condarc"


def render_condarc(mirror: Mirror) -> str:
    base = mirror.base
    return "\n".join([
        "channels:",
        "  - defaults",
        "show_channel_urls: true",
        "default_channels:",
        f"  - {base}/anaconda/pkgs/main",
        f"  - {base}/anaconda/pkgs/r",
        f"  - {base}/anaconda/pkgs/msys2",
        "custom_channels:",
        f"  conda-forge: {base}/anaconda/cloud",
        f"  pytorch: {base}/anaconda/cloud",
    ])


class CondaTool(ConfigFileTool, MirrorTool):
    config_file_name = _CONDARC

    def info(self) -> ToolInfo:
        return self._describe(
            key="conda",
            name="Conda",
            full_name="Conda (data science package manager)",
            icon="🐍",
            category=Category.OTHER,
            description=(
                "Conda manages Python and binary packages for data science; its "
                "channels can be served from a mirror."
            ),
            official_site="https://docs.conda.io/",
            documentation="https://docs.conda.io/projects/conda/en/latest/user-guide/configuration/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn"),
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Conda",
            mirror=mirror,
            backup=backup_file(_CONDARC),
            apply=[*heredoc(_CONDARC, render_condarc(mirror)), "conda clean -i -y"],
            verify=["conda config --show channels default_channels"],
            undo=f"cp {_CONDARC}.backup.<timestamp> {_CONDARC} && conda clean -i -y",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        base = mirror.base
        return "\n".join([
            "conda config --set show_channel_urls yes",
            f"conda config --add default_channels {base}/anaconda/pkgs/main",
            f"conda config --set custom_channels.conda-forge {base}/anaconda/cloud",
        ])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "# Conda config file (.condarc)",
            GENERATOR_TAG,
            f"# Location: {_CONDARC}",
            "",
            render_condarc(mirror),
        ]) + "\n"


# ═══════════════════════════════════════════════════════════════════
#  Flutter
# ═══════════════════════════════════════════════════════════════════


def _flutter_env(mirror: Mirror) -> list[tuple[str, str]]:
    return [
        ("PUB_HOSTED_URL", f"{mirror.base}/dart-pub"),
        ("FLUTTER_STORAGE_BASE_URL", f"{mirror.base}/flutter"),
    ]


class FlutterTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="flutter",
            name="Flutter",
            full_name="Flutter (cross-platform app framework)",
            icon="🐦",
            category=Category.OTHER,
            description=(
                "Flutter downloads its SDK artifacts and Dart pub packages from "
                "two hosts that both have mirrors."
            ),
            official_site="https://flutter.dev/",
            documentation="https://docs.flutter.dev/community/china",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com"),
            Mirror(key="shanghai", name="SJTU", url="https://mirror.sjtu.edu.cn"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        env = _flutter_env(mirror)
        backup = [
            "if [ -f ~/.zshrc ]; then",
            "    RC_FILE=~/.zshrc",
            "elif [ -f ~/.bash_profile ]; then",
            "    RC_FILE=~/.bash_profile",
            "else",
            "    RC_FILE=~/.bashrc",
            "fi",
            *backup_file('"$RC_FILE"', label="shell profile"),
        ]
        apply = ['touch "$RC_FILE"']
        apply += [f'export {name}="{value}"' for name, value in env]
        for name, value in env:
            apply.extend(append_once('"$RC_FILE"', f'export {name}="{value}"'))
        return compose_script(
            title="Flutter",
            mirror=mirror,
            backup=backup,
            apply=apply,
            verify=['echo "PUB_HOSTED_URL=$PUB_HOSTED_URL"', "# Then run: flutter doctor"],
            undo="remove the PUB_HOSTED_URL and FLUTTER_STORAGE_BASE_URL lines from your shell profile",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join(f'export {name}="{value}"' for name, value in _flutter_env(mirror))


# ═══════════════════════════════════════════════════════════════════
#  CPAN
# ═══════════════════════════════════════════════════════════════════


class CpanTool(MirrorTool):
    def info(self) -> ToolInfo:
        return self._describe(
            key="cpan",
            name="CPAN",
            full_name="CPAN (Perl package manager)",
            icon="🐪",
            category=Category.OTHER,
            description="CPAN is the archive of Perl modules and the client that installs them.",
            official_site="https://www.cpan.org/",
            documentation="https://metacpan.org/pod/CPAN",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com/CPAN/"),
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn/CPAN/"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn/CPAN/"),
        )

    def _perl_edit(self, mirror: Mirror) -> str:
        return (
            "CPAN::HandleConfig->load; "
            f"CPAN::HandleConfig->edit(\"urllist\", \"unshift\", \"{mirror.url}\"); "
            "CPAN::HandleConfig->commit"
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="CPAN",
            mirror=mirror,
            backup=["mkdir -p ~/.cpan/CPAN", *backup_file("~/.cpan/CPAN/MyConfig.pm")],
            apply=[f"perl -MCPAN -e '{self._perl_edit(mirror)}'"],
            verify=["perl -MCPAN -e 'CPAN::HandleConfig->load; print join(\"\\n\", @{$CPAN::Config->{urllist}}), \"\\n\"'"],
            undo="cp ~/.cpan/CPAN/MyConfig.pm.backup.<timestamp> ~/.cpan/CPAN/MyConfig.pm",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return f"perl -MCPAN -e '{self._perl_edit(mirror)}'"


# ═══════════════════════════════════════════════════════════════════
#  CRAN
# ═══════════════════════════════════════════════════════════════════

_RPROFILE = "~/.Rprofile"


class CranTool(ConfigFileTool, MirrorTool):
    config_file_name = _RPROFILE

    def info(self) -> ToolInfo:
        return self._describe(
            key="cran",
            name="CRAN",
            full_name="CRAN (R package repository)",
            icon="📊",
            category=Category.OTHER,
            description="CRAN hosts R packages installed with install.packages().",
            official_site="https://cran.r-project.org/",
            documentation="https://cran.r-project.org/mirrors.html",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn/CRAN/"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn/CRAN/"),
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com/CRAN/"),
        )

    def _options_line(self, mirror: Mirror) -> str:
        return f'options(repos = c(CRAN = "{mirror.url}"))'

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        content = "\n".join([f"# CRAN mirror - {mirror.name}", self._options_line(mirror)])
        return compose_script(
            title="CRAN",
            mirror=mirror,
            backup=backup_file(_RPROFILE),
            apply=heredoc(_RPROFILE, content),
            verify=["Rscript -e 'getOption(\"repos\")'"],
            undo=f"cp {_RPROFILE}.backup.<timestamp> {_RPROFILE}",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join(["# Run inside R:", self._options_line(mirror)])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "# R profile (.Rprofile)",
            GENERATOR_TAG,
            f"# Location: {_RPROFILE} or the project root",
            "",
            f"# CRAN mirror - {mirror.name}",
            self._options_line(mirror),
        ]) + "\n"
