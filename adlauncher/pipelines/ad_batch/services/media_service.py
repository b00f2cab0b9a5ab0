"""
Media Resolver - turn each MediaAsset into a platform reference.

Images resolve to an image hash (POST /act_x/adimages), videos to a video
id (POST /act_x/advideos). Assets that already carry a reference, e.g.
videos relayed to Meta out-of-band, are reused without any upload call.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from ....services.exceptions import MediaUploadError, MetaApiError, NoMediaResolvedError
from ....services.meta_graph_client import MetaGraphClient
from ....services.models import AdGroup, AspectRatio, MediaAsset, MediaKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedMedia:
    ref: str                            # image hash or video id
    kind: MediaKind
    aspect_ratio: AspectRatio
    filename: str
    thumbnail_url: Optional[str] = None
    uploaded: bool = False

    @property
    def is_video(self) -> bool:
        return self.kind == MediaKind.VIDEO


@dataclass
class ResolvedGroup:
    media: List[ResolvedMedia] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class MediaResolver:
    """Uploads or reuses creative media, one asset at a time."""

    def __init__(self, graph: MetaGraphClient):
        self.graph = graph

    async def resolve(self, ad_account_id: str, asset: MediaAsset) -> Optional[ResolvedMedia]:
        """
        Resolve one asset.

        Returns:
            ResolvedMedia, or None when the asset has neither payload nor
            reference (skipped, not an error)

        Raises:
            MediaUploadError: the upload endpoint rejected the file
        """
        thumbnail_url = asset.thumbnail_url if asset.is_video else None

        if asset.resolved_ref:
            logger.debug(f"Reusing {asset.kind.value} ref {asset.resolved_ref} for {asset.filename}")
            return ResolvedMedia(
                ref=asset.resolved_ref,
                kind=asset.kind,
                aspect_ratio=asset.aspect_ratio,
                filename=asset.filename,
                thumbnail_url=thumbnail_url,
            )

        if not asset.payload:
            logger.warning(f"Skipping {asset.filename}: no payload and no resolved reference")
            return None

        try:
            if asset.is_video:
                ref = await self._upload_video(ad_account_id, asset)
            else:
                ref = await self._upload_image(ad_account_id, asset)
        except MetaApiError as e:
            raise MediaUploadError(e.detail, filename=asset.filename) from e
        except httpx.HTTPError as e:
            raise MediaUploadError(str(e) or type(e).__name__, filename=asset.filename) from e

        return ResolvedMedia(
            ref=ref,
            kind=asset.kind,
            aspect_ratio=asset.aspect_ratio,
            filename=asset.filename,
            thumbnail_url=thumbnail_url,
            uploaded=True,
        )

    async def _upload_image(self, ad_account_id: str, asset: MediaAsset) -> str:
        logger.info(f"Uploading image {asset.filename} to {ad_account_id}")
        response = await self.graph.post_edge(
            ad_account_id,
            "adimages",
            {"bytes": asset.payload, "name": asset.filename},
        )

        # {"images": {"<name>": {"hash": "...", "url": "..."}}}
        images = response.get("images") or {}
        if not images:
            raise MediaUploadError("upload returned no image entry", filename=asset.filename)
        entry = next(iter(images.values()))
        image_hash = entry.get("hash")
        if not image_hash:
            raise MediaUploadError("upload returned no image hash", filename=asset.filename)
        return image_hash

    async def _upload_video(self, ad_account_id: str, asset: MediaAsset) -> str:
        try:
            content = base64.b64decode(asset.payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MediaUploadError(f"payload is not valid base64 ({e})", filename=asset.filename) from e

        logger.info(f"Uploading video {asset.filename} ({len(content)} bytes) to {ad_account_id}")
        response = await self.graph.post_edge(
            ad_account_id,
            "advideos",
            {"name": asset.filename},
            files={"source": (asset.filename, content)},
        )
        video_id = response.get("id")
        if not video_id:
            raise MediaUploadError("upload returned no video id", filename=asset.filename)
        return video_id

    async def resolve_group(self, ad_account_id: str, group: AdGroup) -> ResolvedGroup:
        """
        Resolve every asset of a group, in order.

        Raises:
            MediaUploadError: first upload failure (the group stops there)
            NoMediaResolvedError: nothing resolved, including empty groups
        """
        resolved = ResolvedGroup()
        for asset in group.media:
            media = await self.resolve(ad_account_id, asset)
            if media is None:
                resolved.skipped.append(asset.filename)
            else:
                resolved.media.append(media)

        if not resolved.media:
            raise NoMediaResolvedError(group.ad_name)

        uploaded = sum(1 for m in resolved.media if m.uploaded)
        logger.info(
            f"Resolved {len(resolved.media)} media for '{group.ad_name}' "
            f"({uploaded} uploaded, {len(resolved.media) - uploaded} reused, "
            f"{len(resolved.skipped)} skipped)"
        )
        return resolved
