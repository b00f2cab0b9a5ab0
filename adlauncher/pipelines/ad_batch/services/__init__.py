"""
Ad batch services - one class per pipeline step.
"""

from .template_service import TemplateResolver
from .ad_set_service import AdSetDuplicator
from .media_service import MediaResolver, ResolvedMedia, ResolvedGroup
from .creative_service import (
    CreativeBuilder,
    CreativePayload,
    CreativeResult,
    ImagesOnly,
    VideoOnly,
    VideoWithThumbnailImage,
    compose_media,
)
from .ad_service import AdCreator

__all__ = [
    "TemplateResolver",
    "AdSetDuplicator",
    "MediaResolver",
    "ResolvedMedia",
    "ResolvedGroup",
    "CreativeBuilder",
    "CreativePayload",
    "CreativeResult",
    "ImagesOnly",
    "VideoOnly",
    "VideoWithThumbnailImage",
    "compose_media",
    "AdCreator",
]
