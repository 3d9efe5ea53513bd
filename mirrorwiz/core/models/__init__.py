"""
Domain models — Pydantic types for the mirror registry.

All models are re-exported here for convenient access:

    from mirrorwiz.core.models import Mirror, ToolInfo, GeneratedArtifact
"""

from mirrorwiz.core.models.artifact import GeneratedArtifact
from mirrorwiz.core.models.mirror import Mirror, url_origin
from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.models.tool import Category, CategoryGroup, ToolInfo

__all__ = [
    "Category",
    "CategoryGroup",
    "GeneratedArtifact",
    "Mirror",
    "SiteConfig",
    "ToolInfo",
    "url_origin",
]
