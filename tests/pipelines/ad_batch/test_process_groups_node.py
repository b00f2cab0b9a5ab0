"""
Tests for ProcessGroupsNode - the sequential per-group fold.

All services are mocked; no Graph API calls.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from adlauncher.pipelines.ad_batch.nodes.compile_results import CompileResultsNode
from adlauncher.pipelines.ad_batch.nodes.process_groups import ProcessGroupsNode
from adlauncher.pipelines.ad_batch.observer import RecordingObserver, StepOutcome
from adlauncher.pipelines.ad_batch.services.creative_service import CreativeResult
from adlauncher.pipelines.ad_batch.services.media_service import ResolvedGroup, ResolvedMedia
from adlauncher.pipelines.ad_batch.state import AdBatchPipelineState
from adlauncher.services.exceptions import CreativeRejectedError, MetaApiError, NoMediaResolvedError
from adlauncher.services.models import (
    AdGroup,
    AdSetConfig,
    AspectRatio,
    GroupStatus,
    MediaAsset,
    MediaKind,
    TemplateContext,
)


def _group(name):
    return AdGroup(
        group_key=name,
        ad_name=name,
        primary_text=f"{name} body",
        headline=f"{name} title",
        url="https://x.test",
        media=[MediaAsset(filename=f"{name}.png", payload="aW1n")],
    )


def _resolved(name):
    return ResolvedGroup(media=[ResolvedMedia(
        ref=f"hash_{name}", kind=MediaKind.IMAGE, aspect_ratio=AspectRatio.OTHER, filename=f"{name}.png"
    )])


def _make_state(names=("g0", "g1", "g2"), **overrides):
    defaults = {
        "template_ad_id": "ad_t",
        "new_ad_set_name": "Batch",
        "groups": [_group(n) for n in names],
        "template": TemplateContext(
            source_ad_id="ad_t",
            source_ad_set_id="as_t",
            ad_account_id="act_1",
            page_id="page_1",
            ad_set_config=AdSetConfig(campaign_id="c1"),
        ),
        "ad_set_id": "as_new",
    }
    defaults.update(overrides)
    return AdBatchPipelineState(**defaults)


def _make_ctx(state):
    """Create a mock GraphRunContext with mocked services and a recording observer."""
    ctx = MagicMock()
    ctx.state = state
    ctx.deps = MagicMock()
    ctx.deps.observer = RecordingObserver()
    ctx.deps.media.resolve_group = AsyncMock(side_effect=lambda account, group: _resolved(group.ad_name))
    ctx.deps.creatives.create = AsyncMock(
        side_effect=lambda account, ad_name, *args: CreativeResult(f"cr_{ad_name}", "single_image")
    )
    ctx.deps.ads.create = AsyncMock(side_effect=lambda account, ad_set, creative_id, *args: f"ad_{creative_id}")
    return ctx


class TestProcessGroupsNode:

    @pytest.mark.asyncio
    async def test_all_groups_succeed_in_order(self):
        ctx = _make_ctx(_make_state())

        next_node = await ProcessGroupsNode().run(ctx)

        assert isinstance(next_node, CompileResultsNode)
        assert [r.ad_name for r in ctx.state.results] == ["g0", "g1", "g2"]
        assert [r.ad_id for r in ctx.state.results] == ["ad_cr_g0", "ad_cr_g1", "ad_cr_g2"]
        assert all(g.status == GroupStatus.SUCCESS for g in ctx.state.groups)
        assert ctx.state.current_step == "process_groups_complete"

    @pytest.mark.asyncio
    async def test_creative_failure_is_isolated_to_its_group(self):
        ctx = _make_ctx(_make_state())

        async def create_creative(account, ad_name, *args):
            if ad_name == "g1":
                raise CreativeRejectedError("Failed to create creative: Image too small")
            return CreativeResult(f"cr_{ad_name}", "single_image")

        ctx.deps.creatives.create = AsyncMock(side_effect=create_creative)

        await ProcessGroupsNode().run(ctx)

        results = ctx.state.results
        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "Failed to create creative: Image too small"
        assert results[1].ad_id is None
        assert ctx.state.groups[1].status == GroupStatus.FAILED
        assert ctx.state.groups[1].error == "Failed to create creative: Image too small"
        assert ctx.deps.ads.create.await_count == 2
        assert ctx.deps.observer.steps(StepOutcome.FAILED) == ["create_creative"]
        assert ctx.deps.observer.for_group(1)[-1].detail == "Failed to create creative: Image too small"

    @pytest.mark.asyncio
    async def test_empty_group_fails_alone(self):
        ctx = _make_ctx(_make_state(names=("g0", "empty")))
        ctx.state.groups[1].media = []
        ctx.deps.media.resolve_group = AsyncMock(side_effect=[
            _resolved("g0"), NoMediaResolvedError("empty"),
        ])

        await ProcessGroupsNode().run(ctx)

        assert [r.success for r in ctx.state.results] == [True, False]
        assert ctx.state.results[1].error == "No media could be resolved for ad 'empty'"
        assert ctx.deps.creatives.create.await_count == 1

    @pytest.mark.asyncio
    async def test_untranslated_platform_error_still_fails_group(self):
        ctx = _make_ctx(_make_state(names=("g0",)))
        ctx.deps.ads.create = AsyncMock(side_effect=MetaApiError("Ad set is archived"))

        await ProcessGroupsNode().run(ctx)

        assert ctx.state.results[0].success is False
        assert ctx.state.results[0].error == "Ad set is archived"

    @pytest.mark.asyncio
    async def test_unexpected_exception_fails_only_its_group(self):
        ctx = _make_ctx(_make_state())
        ctx.deps.ads.create = AsyncMock(side_effect=[
            "ad_cr_g0",
            RuntimeError("connection pool closed"),
            "ad_cr_g2",
        ])

        next_node = await ProcessGroupsNode().run(ctx)

        assert isinstance(next_node, CompileResultsNode)
        assert [r.success for r in ctx.state.results] == [True, False, True]
        assert ctx.state.results[1].error == "RuntimeError: connection pool closed"
        assert ctx.state.groups[1].status == GroupStatus.FAILED
        assert ctx.state.results[2].ad_id == "ad_cr_g2"

    @pytest.mark.asyncio
    async def test_scheduled_time_forwarded_to_ads(self):
        ctx = _make_ctx(_make_state(names=("g0",), scheduled_time="2026-11-01T09:00:00Z"))

        await ProcessGroupsNode().run(ctx)

        ctx.deps.ads.create.assert_awaited_once_with(
            "act_1", "as_new", "cr_g0", "g0", "2026-11-01T09:00:00Z"
        )

    @pytest.mark.asyncio
    async def test_skips_and_warnings_are_observed(self):
        ctx = _make_ctx(_make_state(names=("g0",)))
        resolved = _resolved("g0")
        resolved.skipped.append("g0_1x1.png")
        ctx.deps.media.resolve_group = AsyncMock(return_value=resolved)
        ctx.deps.creatives.create = AsyncMock(
            return_value=CreativeResult("cr_1", "video", ("No thumbnail available for video g0.mp4",))
        )

        await ProcessGroupsNode().run(ctx)

        events = ctx.deps.observer.for_group(0)
        assert [(e.step, e.detail) for e in events if e.outcome == StepOutcome.SKIPPED] == [
            ("resolve_media", "g0_1x1.png")
        ]
        assert [e.step for e in events if e.outcome == StepOutcome.WARNING] == ["create_creative"]

    @pytest.mark.asyncio
    async def test_no_groups(self):
        ctx = _make_ctx(_make_state(names=()))

        next_node = await ProcessGroupsNode().run(ctx)

        assert isinstance(next_node, CompileResultsNode)
        assert ctx.state.results == []
