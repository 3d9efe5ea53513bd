"""
Generated artifact model — the rendered output for one combination.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from mirrorwiz.core.models.tool import Category


class GeneratedArtifact(BaseModel):
    """Everything rendered for one (tool, mirror, OS version) selection.

    Attributes:
        tool:           Tool key.
        mirror:         Mirror key.
        os_version:     OS version key, ``None`` for tools without one.
        category:       Tool category.
        script:         Full shell script.
        manual_command: Short paste-ready snippet.
        config_file:    Standalone config file body, when the tool has one.
        filename:       Script file name (``npm-aliyun.sh``).
        page_path:      Site URL path (``/tools/npm/aliyun/``).
    """

    model_config = ConfigDict(frozen=True)

    tool: str
    mirror: str
    os_version: str | None = None
    category: Category
    script: str
    manual_command: str
    config_file: str | None = None
    filename: str
    page_path: str

    @property
    def has_config_file(self) -> bool:
        return self.config_file is not None
