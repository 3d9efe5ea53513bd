"""
System package managers — apt, yum, homebrew.

apt and yum are OS-versioned: the repository layout depends on the
distribution release, so every release gets its own script.

apt layouts
───────────
  Ubuntu ≤ 22.04    one-line ``deb`` entries in /etc/apt/sources.list
  Ubuntu ≥ 24.04    deb822 stanza in /etc/apt/sources.list.d/ubuntu.sources
  Debian ≤ 10       security suite ``<codename>/updates``
  Debian ≥ 11       security suite ``<codename>-security``
  Debian ≥ 12       adds the ``non-free-firmware`` component
"""

from __future__ import annotations

from dataclasses import dataclass

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import MirrorTool, OsVersionedTool, index_mirrors
from mirrorwiz.core.registry.shell import (
    append_once,
    backup_file,
    compose_script,
    echo,
    heredoc,
)

# ═══════════════════════════════════════════════════════════════════
#  APT
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AptRelease:
    """One Debian-family release."""

    label: str
    distro: str         # "ubuntu" | "debian"
    version: str        # "22.04" | "12"
    codename: str

    @property
    def major(self) -> int:
        return int(self.version.split(".")[0])

    @property
    def deb822(self) -> bool:
        """Whether the release ships its sources in deb822 format."""
        return self.distro == "ubuntu" and self.major >= 24

    @property
    def sources_path(self) -> str:
        if self.deb822:
            return "/etc/apt/sources.list.d/ubuntu.sources"
        return "/etc/apt/sources.list"

    @property
    def upstream_hosts(self) -> list[str]:
        if self.distro == "ubuntu":
            return ["http://archive.ubuntu.com", "http://security.ubuntu.com"]
        return ["http://deb.debian.org", "http://security.debian.org"]


APT_RELEASES: dict[str, AptRelease] = {
    "ubuntu-24.04": AptRelease("Ubuntu 24.04 LTS (Noble Numbat)", "ubuntu", "24.04", "noble"),
    "ubuntu-22.04": AptRelease("Ubuntu 22.04 LTS (Jammy Jellyfish)", "ubuntu", "22.04", "jammy"),
    "ubuntu-20.04": AptRelease("Ubuntu 20.04 LTS (Focal Fossa)", "ubuntu", "20.04", "focal"),
    "ubuntu-18.04": AptRelease("Ubuntu 18.04 LTS (Bionic Beaver)", "ubuntu", "18.04", "bionic"),
    "debian-12": AptRelease("Debian 12 (Bookworm)", "debian", "12", "bookworm"),
    "debian-11": AptRelease("Debian 11 (Bullseye)", "debian", "11", "bullseye"),
    "debian-10": AptRelease("Debian 10 (Buster)", "debian", "10", "buster"),
}

_UBUNTU_COMPONENTS = "main restricted universe multiverse"


def _debian_components(release: AptRelease) -> str:
    if release.major >= 12:
        return "main contrib non-free non-free-firmware"
    return "main contrib non-free"


def render_sources(mirror: Mirror, release: AptRelease) -> str:
    """Render the APT sources for a release, in the release's native format."""
    base = mirror.base

    if release.distro == "ubuntu":
        suites = [
            release.codename,
            f"{release.codename}-updates",
            f"{release.codename}-backports",
            f"{release.codename}-security",
        ]
        if release.deb822:
            return "\n".join([
                "Types: deb",
                f"URIs: {base}/ubuntu/",
                f"Suites: {' '.join(suites)}",
                f"Components: {_UBUNTU_COMPONENTS}",
                "Signed-By: /usr/share/keyrings/ubuntu-archive-keyring.gpg",
            ])
        return "\n".join(
            f"deb {base}/ubuntu/ {suite} {_UBUNTU_COMPONENTS}" for suite in suites
        )

    components = _debian_components(release)
    codename = release.codename
    if release.major >= 11:
        security = f"deb {base}/debian-security {codename}-security {components}"
    else:
        security = f"deb {base}/debian-security {codename}/updates {components}"
    return "\n".join([
        f"deb {base}/debian/ {codename} {components}",
        f"deb {base}/debian/ {codename}-updates {components}",
        security,
    ])


class AptTool(OsVersionedTool):
    """APT for Debian and Ubuntu."""

    def info(self) -> ToolInfo:
        return self._describe(
            key="apt",
            name="APT",
            full_name="APT (Debian/Ubuntu package manager)",
            icon="🐧",
            category=Category.SYSTEM,
            description=(
                "APT installs, upgrades and removes software on Debian and Ubuntu. "
                "Pointing its sources at a nearby mirror makes apt update and "
                "apt install finish in seconds instead of minutes."
            ),
            official_site="https://wiki.debian.org/Apt",
            documentation="https://manpages.debian.org/apt",
            platforms=["Linux"],
        )

    def os_versions(self) -> dict[str, str]:
        return {key: release.label for key, release in APT_RELEASES.items()}

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="http://mirrors.aliyun.com",
                   test_url="https://mirrors.aliyun.com"),
            Mirror(key="tencent", name="Tencent Cloud", url="http://mirrors.cloud.tencent.com",
                   test_url="https://mirrors.cloud.tencent.com"),
            Mirror(key="tsinghua", name="Tsinghua University", url="http://mirrors.tuna.tsinghua.edu.cn",
                   test_url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="huawei", name="Huawei Cloud", url="http://mirrors.huaweicloud.com",
                   test_url="https://mirrors.huaweicloud.com"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        release = APT_RELEASES[os_version or ""]
        target = release.sources_path
        apply = heredoc(target, render_sources(mirror, release), sudo=True)
        if release.deb822:
            # The legacy file must not duplicate the deb822 entries.
            apply = [
                *backup_file("/etc/apt/sources.list", sudo=True),
                "sudo truncate -s 0 /etc/apt/sources.list 2>/dev/null || true",
                *apply,
            ]
        apply += ["", echo("Refreshing package lists..."), "sudo apt update"]
        return compose_script(
            title="APT",
            mirror=mirror,
            os_label=release.label,
            backup=backup_file(target, sudo=True),
            apply=apply,
            verify=[f"grep -v '^#' {target} | sed '/^$/d'"],
            undo=f"sudo cp {target}.backup.<timestamp> {target} && sudo apt update",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        release = APT_RELEASES[os_version or ""]
        target = release.sources_path
        expressions = " ".join(
            f"-e 's|{host}|{mirror.base}|g'" for host in release.upstream_hosts
        )
        return "\n".join([
            f"sudo cp {target} {target}.bak",
            f"sudo sed -i {expressions} {target}",
            "sudo apt update",
        ])


# ═══════════════════════════════════════════════════════════════════
#  YUM / DNF
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class YumRelease:
    """One CentOS release and where its repositories live on a mirror."""

    label: str
    package_manager: str    # "yum" | "dnf"
    repo_root: str          # path under the mirror base
    repos: tuple[str, ...]  # repository names, in order
    gpg_key: str
    upstream: str           # baseurl prefix used by the stock repo files
    stock_glob: str         # stock repo files
    legacy_layout: bool = False  # CentOS 7: <root>/<repo>/$basearch/


YUM_RELEASES: dict[str, YumRelease] = {
    "centos-7": YumRelease(
        label="CentOS 7",
        package_manager="yum",
        repo_root="centos/7",
        repos=("os", "updates", "extras"),
        gpg_key="file:///etc/pki/rpm-gpg/RPM-GPG-KEY-CentOS-7",
        upstream="http://mirror.centos.org/centos",
        stock_glob="CentOS-*.repo",
        legacy_layout=True,
    ),
    "centos-8": YumRelease(
        label="CentOS 8",
        package_manager="dnf",
        repo_root="centos-vault/8.5.2111",
        repos=("BaseOS", "AppStream", "extras"),
        gpg_key="file:///etc/pki/rpm-gpg/RPM-GPG-KEY-centosofficial",
        upstream="http://mirror.centos.org/$contentdir",
        stock_glob="CentOS-*.repo",
    ),
    "centos-stream-8": YumRelease(
        label="CentOS Stream 8",
        package_manager="dnf",
        repo_root="centos-vault/8-stream",
        repos=("BaseOS", "AppStream", "extras"),
        gpg_key="file:///etc/pki/rpm-gpg/RPM-GPG-KEY-centosofficial",
        upstream="http://mirror.centos.org/$contentdir",
        stock_glob="CentOS-Stream-*.repo",
    ),
    "centos-stream-9": YumRelease(
        label="CentOS Stream 9",
        package_manager="dnf",
        repo_root="centos-stream/9-stream",
        repos=("BaseOS", "AppStream", "CRB"),
        gpg_key="file:///etc/pki/rpm-gpg/RPM-GPG-KEY-centosofficial",
        upstream="https://mirror.stream.centos.org",
        stock_glob="centos*.repo",
    ),
}

YUM_REPO_DIR = "/etc/yum.repos.d"
YUM_REPO_FILE = f"{YUM_REPO_DIR}/mirrorwiz.repo"


def render_repo_file(mirror: Mirror, release: YumRelease) -> str:
    """Render a .repo file with one section per repository."""
    sections = []
    for repo in release.repos:
        if release.legacy_layout:
            baseurl = f"{mirror.base}/{release.repo_root}/{repo}/$basearch/"
        else:
            baseurl = f"{mirror.base}/{release.repo_root}/{repo}/$basearch/os/"
        sections.append("\n".join([
            f"[{repo.lower()}]",
            f"name={release.label} - {repo} - {mirror.name}",
            f"baseurl={baseurl}",
            "gpgcheck=1",
            "enabled=1",
            f"gpgkey={release.gpg_key}",
        ]))
    return "\n\n".join(sections)


class YumTool(OsVersionedTool):
    """YUM/DNF for CentOS."""

    def info(self) -> ToolInfo:
        return self._describe(
            key="yum",
            name="YUM",
            full_name="YUM (CentOS/RHEL package manager)",
            icon="🎩",
            category=Category.SYSTEM,
            description=(
                "YUM and its successor DNF resolve and install RPM packages on "
                "CentOS and RHEL-compatible systems."
            ),
            official_site="https://www.centos.org/",
            documentation="https://docs.fedoraproject.org/en-US/quick-docs/dnf/",
            platforms=["Linux"],
        )

    def os_versions(self) -> dict[str, str]:
        return {key: release.label for key, release in YUM_RELEASES.items()}

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com"),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirrors.cloud.tencent.com"),
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="huawei", name="Huawei Cloud", url="https://mirrors.huaweicloud.com"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        release = YUM_RELEASES[os_version or ""]
        pm = release.package_manager
        backup = [
            f"sudo mkdir -p {YUM_REPO_DIR}/backup",
            f"for repo in {YUM_REPO_DIR}/*.repo; do",
            '    [ -e "$repo" ] || continue',
            f'    [ "$repo" = {YUM_REPO_FILE} ] && continue',
            f'    sudo mv "$repo" {YUM_REPO_DIR}/backup/',
            "done",
            echo(f"✓ Existing repo files moved to {YUM_REPO_DIR}/backup"),
        ]
        apply = [
            *heredoc(YUM_REPO_FILE, render_repo_file(mirror, release), sudo=True),
            "",
            echo("Rebuilding metadata cache..."),
            f"sudo {pm} clean all",
            f"sudo {pm} makecache",
        ]
        return compose_script(
            title="YUM",
            mirror=mirror,
            os_label=release.label,
            backup=backup,
            apply=apply,
            verify=[f"{pm} repolist"],
            undo=(
                f"sudo rm -f {YUM_REPO_FILE} && "
                f"sudo mv {YUM_REPO_DIR}/backup/*.repo {YUM_REPO_DIR}/ && sudo {pm} clean all"
            ),
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        release = YUM_RELEASES[os_version or ""]
        pm = release.package_manager
        root = release.repo_root.split("/")[0]
        return "\n".join([
            f"sudo sed -i.bak -e 's|^mirrorlist=|#mirrorlist=|g' -e 's|^metalink=|#metalink=|g' \\",
            f"    -e 's|^#\\s*baseurl={release.upstream}|baseurl={mirror.base}/{root}|g' \\",
            f"    {YUM_REPO_DIR}/{release.stock_glob}",
            f"sudo {pm} clean all && sudo {pm} makecache",
        ])


# ═══════════════════════════════════════════════════════════════════
#  Homebrew
# ═══════════════════════════════════════════════════════════════════

# mirror key → (brew.git path, bottles path), relative to the mirror base
_BREW_PATHS: dict[str, tuple[str, str]] = {
    "tsinghua": ("git/homebrew/brew.git", "homebrew-bottles"),
    "ustc": ("brew.git", "homebrew-bottles"),
    "aliyun": ("homebrew/brew.git", "homebrew/homebrew-bottles"),
}


def _brew_env(mirror: Mirror) -> list[tuple[str, str]]:
    git_path, bottles = _BREW_PATHS.get(mirror.key, _BREW_PATHS["tsinghua"])
    return [
        ("HOMEBREW_BREW_GIT_REMOTE", f"{mirror.base}/{git_path}"),
        ("HOMEBREW_API_DOMAIN", f"{mirror.base}/{bottles}/api"),
        ("HOMEBREW_BOTTLE_DOMAIN", f"{mirror.base}/{bottles}"),
    ]


class HomebrewTool(MirrorTool):
    """Homebrew for macOS and Linux."""

    def info(self) -> ToolInfo:
        return self._describe(
            key="homebrew",
            name="Homebrew",
            full_name="Homebrew (macOS package manager)",
            icon="🍺",
            category=Category.SYSTEM,
            description=(
                "Homebrew installs command line tools and applications on macOS "
                "and Linux. Its git remotes and bottle downloads can both be "
                "served from a mirror."
            ),
            official_site="https://brew.sh/",
            documentation="https://docs.brew.sh/",
            platforms=["macOS", "Linux"],
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(key="tsinghua", name="Tsinghua University", url="https://mirrors.tuna.tsinghua.edu.cn"),
            Mirror(key="ustc", name="USTC", url="https://mirrors.ustc.edu.cn"),
            Mirror(key="aliyun", name="Aliyun", url="https://mirrors.aliyun.com"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        env = _brew_env(mirror)
        backup = [
            'if [ "${SHELL##*/}" = "zsh" ]; then',
            "    RC_FILE=~/.zshrc",
            "else",
            "    RC_FILE=~/.bash_profile",
            "fi",
            *backup_file('"$RC_FILE"', label="shell profile"),
        ]
        apply = ['touch "$RC_FILE"']
        for name, value in env:
            apply.append(f'export {name}="{value}"')
        for name, value in env:
            apply.extend(append_once('"$RC_FILE"', f'export {name}="{value}"'))
        apply += ["", echo("Updating Homebrew..."), "brew update"]
        return compose_script(
            title="Homebrew",
            mirror=mirror,
            backup=backup,
            apply=apply,
            verify=["brew config | grep -E 'HOMEBREW_(BREW_GIT_REMOTE|API_DOMAIN|BOTTLE_DOMAIN)'"],
            undo="remove the HOMEBREW_* export lines from your shell profile, then run brew update",
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        lines = [f'export {name}="{value}"' for name, value in _brew_env(mirror)]
        lines.append("brew update")
        return "\n".join(lines)
