"""
Tests for CreativeBuilder - creative shape selection and submission.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from adlauncher.pipelines.ad_batch.services.creative_service import (
    CreativeBuilder,
    ImagesOnly,
    VideoOnly,
    VideoWithThumbnailImage,
    compose_media,
)
from adlauncher.pipelines.ad_batch.services.media_service import ResolvedMedia
from adlauncher.services.exceptions import CreativeRejectedError, MetaApiError
from adlauncher.services.models import AspectRatio, MediaKind


def _image(ref, aspect=AspectRatio.SQUARE):
    return ResolvedMedia(ref=ref, kind=MediaKind.IMAGE, aspect_ratio=aspect, filename=f"{ref}.png")


def _video(ref, thumbnail_url=None):
    return ResolvedMedia(
        ref=ref,
        kind=MediaKind.VIDEO,
        aspect_ratio=AspectRatio.VERTICAL,
        filename=f"{ref}.mp4",
        thumbnail_url=thumbnail_url,
    )


COPY = dict(page_id="page_1", message="Body", headline="Title", url="https://x.test")


class TestComposeMedia:

    def test_video_only(self):
        assert compose_media([_video("v1")]) == VideoOnly(video=_video("v1"))

    def test_video_and_image(self):
        composition = compose_media([_image("h1"), _video("v1"), _image("h2")])
        assert composition == VideoWithThumbnailImage(video=_video("v1"), image=_image("h1"))

    def test_images_only(self):
        composition = compose_media([_image("h1"), _image("h2")])
        assert isinstance(composition, ImagesOnly)
        assert [m.ref for m in composition.images] == ["h1", "h2"]

    def test_nothing_resolved(self):
        with pytest.raises(ValueError):
            compose_media([])


class TestBuildPayload:

    def setup_method(self):
        self.builder = CreativeBuilder(MagicMock(), call_to_action="SHOP_NOW")

    def test_single_image_uses_link_data(self):
        payload = self.builder.build_payload(compose_media([_image("h1")]), **COPY)

        assert payload.variant == "single_image"
        assert payload.asset_feed_spec is None
        link_data = payload.object_story_spec["link_data"]
        assert payload.object_story_spec["page_id"] == "page_1"
        assert link_data["image_hash"] == "h1"
        assert link_data["message"] == "Body"
        assert link_data["name"] == "Title"
        assert link_data["call_to_action"] == {"type": "SHOP_NOW", "value": {"link": "https://x.test"}}

    def test_multi_image_lists_every_image(self):
        payload = self.builder.build_payload(
            compose_media([_image("h1", AspectRatio.VERTICAL), _image("h2"), _image("h3")]), **COPY
        )

        assert payload.variant == "multi_image"
        assert payload.object_story_spec["link_data"]["image_hash"] == "h1"
        feed = payload.asset_feed_spec
        assert feed["images"] == [{"hash": "h1"}, {"hash": "h2"}, {"hash": "h3"}]
        assert feed["bodies"] == [{"text": "Body"}]
        assert feed["titles"] == [{"text": "Title"}]
        assert feed["link_urls"] == [{"website_url": "https://x.test"}]
        assert feed["call_to_action_types"] == ["SHOP_NOW"]

    def test_video_with_image_uses_image_as_thumbnail(self):
        payload = self.builder.build_payload(
            compose_media([_video("v1", thumbnail_url="https://thumb"), _image("h1")]), **COPY
        )

        video_data = payload.object_story_spec["video_data"]
        assert payload.variant == "video"
        assert video_data["video_id"] == "v1"
        assert video_data["image_hash"] == "h1"
        assert "image_url" not in video_data
        assert payload.warnings == []

    def test_video_only_uses_thumbnail_url(self):
        payload = self.builder.build_payload(compose_media([_video("v1", thumbnail_url="https://thumb")]), **COPY)

        video_data = payload.object_story_spec["video_data"]
        assert video_data["image_url"] == "https://thumb"
        assert video_data["title"] == "Title"
        assert "link_data" not in payload.object_story_spec

    def test_video_without_any_thumbnail_warns(self):
        payload = self.builder.build_payload(compose_media([_video("v1")]), **COPY)

        video_data = payload.object_story_spec["video_data"]
        assert "image_hash" not in video_data
        assert "image_url" not in video_data
        assert len(payload.warnings) == 1

    def test_same_input_same_payload(self):
        media = [_image("h1"), _image("h2")]
        first = self.builder.build_payload(compose_media(media), **COPY)
        second = self.builder.build_payload(compose_media(media), **COPY)
        assert first == second

    def test_unknown_composition(self):
        with pytest.raises(TypeError):
            self.builder.build_payload(object(), **COPY)


class TestCreate:

    @pytest.mark.asyncio
    async def test_submits_named_creative(self):
        graph = MagicMock()
        graph.post_edge = AsyncMock(return_value={"id": "cr_1"})

        result = await CreativeBuilder(graph).create("act_1", "promo", [_video("v1")], **COPY)

        assert result.creative_id == "cr_1"
        assert result.variant == "video"
        assert len(result.warnings) == 1
        account, edge, request = graph.post_edge.await_args.args
        assert (account, edge) == ("act_1", "adcreatives")
        assert request["name"] == "promo_creative"
        assert request["asset_feed_spec"] is None

    @pytest.mark.asyncio
    async def test_rejection_carries_user_message(self):
        graph = MagicMock()
        graph.post_edge = AsyncMock(side_effect=MetaApiError(
            "Invalid parameter", code=100, error_user_msg="Video is still processing"
        ))

        with pytest.raises(CreativeRejectedError, match="Video is still processing"):
            await CreativeBuilder(graph).create("act_1", "promo", [_video("v1")], **COPY)
