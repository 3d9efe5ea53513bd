"""
Container registries — Docker Hub pull-through mirrors.
"""

from __future__ import annotations

import json

from mirrorwiz.core.models.mirror import Mirror
from mirrorwiz.core.models.tool import Category, ToolInfo
from mirrorwiz.core.registry.base import ConfigFileTool, MirrorTool, index_mirrors
from mirrorwiz.core.registry.shell import backup_file, compose_script, echo, heredoc

_DAEMON_JSON = "/etc/docker/daemon.json"


def render_daemon_json(mirror: Mirror) -> str:
    return json.dumps({"registry-mirrors": [mirror.url]}, indent=2)


class DockerTool(ConfigFileTool, MirrorTool):
    config_file_name = _DAEMON_JSON

    def info(self) -> ToolInfo:
        return self._describe(
            key="docker",
            name="Docker",
            full_name="Docker Hub registry mirror",
            icon="🐳",
            category=Category.CONTAINER,
            description=(
                "The Docker daemon can pull images from Docker Hub through a "
                "registry mirror listed in daemon.json."
            ),
            official_site="https://www.docker.com/",
            documentation="https://docs.docker.com/docker-hub/mirror/",
        )

    def mirrors(self) -> dict[str, Mirror]:
        return index_mirrors(
            Mirror(
                key="aliyun",
                name="Aliyun",
                url="https://registry.cn-hangzhou.aliyuncs.com",
                test_url="https://mirrors.aliyun.com",
                note="Aliyun issues a personal accelerator address; sign in to the "
                     "Aliyun console to get yours.",
            ),
            Mirror(key="tencent", name="Tencent Cloud", url="https://mirror.ccs.tencentyun.com",
                   test_url="https://mirrors.cloud.tencent.com"),
            Mirror(key="daocloud", name="DaoCloud", url="https://docker.m.daocloud.io",
                   test_url="https://www.daocloud.io"),
        )

    def render_script(self, mirror: Mirror, os_version: str | None = None) -> str:
        return compose_script(
            title="Docker",
            mirror=mirror,
            backup=["sudo mkdir -p /etc/docker", *backup_file(_DAEMON_JSON, sudo=True)],
            apply=[
                *heredoc(_DAEMON_JSON, render_daemon_json(mirror), sudo=True),
                "",
                echo("Restarting the Docker daemon..."),
                "sudo systemctl daemon-reload",
                "sudo systemctl restart docker",
            ],
            verify=['docker info 2>/dev/null | grep -A 1 "Registry Mirrors"'],
            undo=(
                f"sudo cp {_DAEMON_JSON}.backup.<timestamp> {_DAEMON_JSON} "
                "&& sudo systemctl restart docker"
            ),
        )

    def render_manual_command(self, mirror: Mirror, os_version: str | None = None) -> str:
        return "\n".join([
            "sudo mkdir -p /etc/docker",
            f"echo '{{\"registry-mirrors\": [\"{mirror.url}\"]}}' | sudo tee {_DAEMON_JSON}",
            "sudo systemctl restart docker",
        ])

    def render_config_file(self, mirror: Mirror, os_version: str | None = None) -> str:
        return render_daemon_json(mirror) + "\n"
