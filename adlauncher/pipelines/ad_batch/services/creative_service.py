"""
Creative Builder - choose the creative shape from resolved media and submit it.

The shape depends only on what media resolved for the group:

    any video, no image  -> VideoOnly                -> video_data
    any video + image(s) -> VideoWithThumbnailImage  -> video_data, image as thumbnail
    exactly one image    -> ImagesOnly(1)            -> link_data
    two or more images   -> ImagesOnly(n)            -> link_data + asset_feed_spec

Multi-image creatives enumerate every image in an asset feed so Meta can
pick the best-fitting aspect ratio per placement.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import httpx

from ....core.config import Config
from ....services.exceptions import CreativeRejectedError, MetaApiError
from ....services.meta_graph_client import MetaGraphClient
from .media_service import ResolvedMedia

logger = logging.getLogger(__name__)


# ============================================================================
# Media composition
# ============================================================================

@dataclass(frozen=True)
class ImagesOnly:
    images: Tuple[ResolvedMedia, ...]


@dataclass(frozen=True)
class VideoOnly:
    video: ResolvedMedia


@dataclass(frozen=True)
class VideoWithThumbnailImage:
    video: ResolvedMedia
    image: ResolvedMedia


MediaComposition = Union[ImagesOnly, VideoOnly, VideoWithThumbnailImage]


def compose_media(resolved: Sequence[ResolvedMedia]) -> MediaComposition:
    """
    Classify resolved media. First video and first image win.

    Raises:
        ValueError: nothing resolved (callers fail the group earlier)
    """
    videos = [m for m in resolved if m.is_video]
    images = [m for m in resolved if not m.is_video]

    if videos:
        if images:
            return VideoWithThumbnailImage(video=videos[0], image=images[0])
        return VideoOnly(video=videos[0])
    if images:
        return ImagesOnly(images=tuple(images))
    raise ValueError("cannot build a creative without resolved media")


# ============================================================================
# Builder
# ============================================================================

@dataclass
class CreativePayload:
    variant: str                                  # "video", "single_image", "multi_image"
    object_story_spec: Dict[str, Any]
    asset_feed_spec: Optional[Dict[str, Any]] = None
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CreativeResult:
    creative_id: str
    variant: str
    warnings: Tuple[str, ...] = ()


class CreativeBuilder:
    """Builds and submits ad creatives."""

    def __init__(self, graph: MetaGraphClient, call_to_action: Optional[str] = None):
        self.graph = graph
        self.call_to_action = call_to_action or Config.DEFAULT_CALL_TO_ACTION

    def _cta(self, url: str) -> Dict[str, Any]:
        return {"type": self.call_to_action, "value": {"link": url}}

    def _video_spec(
        self,
        video: ResolvedMedia,
        thumbnail_image: Optional[ResolvedMedia],
        page_id: str,
        message: str,
        headline: str,
        url: str,
    ) -> CreativePayload:
        video_data: Dict[str, Any] = {
            "video_id": video.ref,
            "message": message,
            "title": headline,
            "link_description": headline,
            "call_to_action": self._cta(url),
        }
        warnings = []
        if thumbnail_image is not None:
            video_data["image_hash"] = thumbnail_image.ref
        elif video.thumbnail_url:
            video_data["image_url"] = video.thumbnail_url
        else:
            warnings.append(f"No thumbnail available for video {video.filename}")

        return CreativePayload(
            variant="video",
            object_story_spec={"page_id": page_id, "video_data": video_data},
            warnings=warnings,
        )

    def _link_data(self, image: ResolvedMedia, message: str, headline: str, url: str) -> Dict[str, Any]:
        return {
            "message": message,
            "name": headline,
            "link": url,
            "image_hash": image.ref,
            "call_to_action": self._cta(url),
        }

    def build_payload(
        self,
        composition: MediaComposition,
        page_id: str,
        message: str,
        headline: str,
        url: str,
    ) -> CreativePayload:
        """Pure: same composition and copy always yield the same payload."""
        if isinstance(composition, VideoWithThumbnailImage):
            return self._video_spec(composition.video, composition.image, page_id, message, headline, url)

        if isinstance(composition, VideoOnly):
            return self._video_spec(composition.video, None, page_id, message, headline, url)

        if isinstance(composition, ImagesOnly):
            images = composition.images
            story_spec = {
                "page_id": page_id,
                "link_data": self._link_data(images[0], message, headline, url),
            }
            if len(images) == 1:
                return CreativePayload(variant="single_image", object_story_spec=story_spec)

            asset_feed_spec = {
                "images": [{"hash": image.ref} for image in images],
                "bodies": [{"text": message}],
                "titles": [{"text": headline}],
                "descriptions": [{"text": headline}],
                "link_urls": [{"website_url": url}],
                "call_to_action_types": [self.call_to_action],
                "ad_formats": ["SINGLE_IMAGE"],
            }
            return CreativePayload(
                variant="multi_image",
                object_story_spec=story_spec,
                asset_feed_spec=asset_feed_spec,
            )

        raise TypeError(f"Unhandled media composition: {composition!r}")

    async def create(
        self,
        ad_account_id: str,
        ad_name: str,
        media: Sequence[ResolvedMedia],
        page_id: str,
        message: str,
        headline: str,
        url: str,
    ) -> CreativeResult:
        """
        Build and submit a creative for one group.

        Raises:
            CreativeRejectedError: upstream rejected the creative; the message
                carries the platform's user-facing detail when it sent one
        """
        payload = self.build_payload(compose_media(media), page_id, message, headline, url)
        for warning in payload.warnings:
            logger.warning(f"{ad_name}: {warning}")

        request = {
            "name": f"{ad_name}_creative",
            "object_story_spec": payload.object_story_spec,
            "asset_feed_spec": payload.asset_feed_spec,
        }
        logger.info(f"Creating {payload.variant} creative for '{ad_name}'")

        try:
            response = await self.graph.post_edge(ad_account_id, "adcreatives", request)
        except MetaApiError as e:
            raise CreativeRejectedError(f"Failed to create creative: {e.detail}") from e
        except httpx.HTTPError as e:
            raise CreativeRejectedError(f"Failed to create creative: {e}") from e

        creative_id = response.get("id")
        if not creative_id:
            raise CreativeRejectedError(f"Creative creation returned no id: {response}")

        return CreativeResult(
            creative_id=creative_id,
            variant=payload.variant,
            warnings=tuple(payload.warnings),
        )
