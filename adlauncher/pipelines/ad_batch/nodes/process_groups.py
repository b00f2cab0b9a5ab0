"""
ProcessGroupsNode - resolve media, create creative and create ad per group.

Groups are processed strictly in input order, one at a time. A failure in
one group is recorded on that group and the batch moves on to the next.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar

from pydantic_graph import BaseNode, GraphRunContext

from ..state import AdBatchPipelineState
from ..dependencies import AdBatchDependencies
from ..observer import StepEvent, StepOutcome
from ..outcome import StepFailed, run_step
from ...metadata import NodeMetadata
from ....core.observability import get_logfire
from ....services.exceptions import AdCreationError, CreativeRejectedError, MediaUploadError
from ....services.models import AdGroup, AdResult, GroupStatus

logger = logging.getLogger(__name__)


@dataclass
class ProcessGroupsNode(BaseNode[AdBatchPipelineState]):
    """
    Step 3: Walk every ad group and create its creative and ad.

    Each group runs resolve_media -> create_creative -> create_ad. The
    first failing step ends that group with an error result; later
    groups are unaffected.

    Reads: groups, template, ad_set_id, scheduled_time
    Writes: results, groups[i].status, groups[i].error
    Services: MediaResolver.resolve_group(), CreativeBuilder.create(),
              AdCreator.create()
    """

    metadata: ClassVar[NodeMetadata] = NodeMetadata(
        inputs=["groups", "template", "ad_set_id", "scheduled_time"],
        outputs=["results"],
        services=["media.resolve_group", "creatives.create", "ads.create"],
    )

    async def run(
        self,
        ctx: GraphRunContext[AdBatchPipelineState, AdBatchDependencies]
    ) -> "CompileResultsNode":
        from .compile_results import CompileResultsNode

        total = len(ctx.state.groups)
        logger.info(f"Step 3: Processing {total} ad groups...")
        ctx.state.current_step = "process_groups"

        for index, group in enumerate(ctx.state.groups):
            logger.info(f"Processing ad {index + 1}/{total}: {group.ad_name}")
            with get_logfire().span("process_group", group_index=index, ad_name=group.ad_name):
                result = await self._process_group(ctx, index, group)
            ctx.state.results.append(result)

        succeeded = sum(1 for r in ctx.state.results if r.success)
        logger.info(f"Processed {total} groups: {succeeded} created, {total - succeeded} failed")
        ctx.state.mark_step_complete("process_groups")
        return CompileResultsNode()

    async def _process_group(
        self,
        ctx: GraphRunContext[AdBatchPipelineState, AdBatchDependencies],
        index: int,
        group: AdGroup,
    ) -> AdResult:
        deps = ctx.deps
        observer = deps.observer
        account = ctx.state.template.ad_account_id
        page_id = ctx.state.template.page_id

        group.status = GroupStatus.IN_PROGRESS
        group.error = None

        def fail(failed: StepFailed) -> AdResult:
            group.status = GroupStatus.FAILED
            group.error = failed.message
            observer.record(StepEvent(index, failed.step, StepOutcome.FAILED, failed.message))
            return AdResult(ad_name=group.ad_name, success=False, error=failed.message)

        # Media
        observer.record(StepEvent(index, "resolve_media", StepOutcome.STARTED))
        media = await run_step(
            "resolve_media",
            lambda: deps.media.resolve_group(account, group),
            MediaUploadError,
        )
        if isinstance(media, StepFailed):
            return fail(media)
        for filename in media.value.skipped:
            observer.record(StepEvent(index, "resolve_media", StepOutcome.SKIPPED, filename))
        observer.record(
            StepEvent(index, "resolve_media", StepOutcome.SUCCEEDED, f"{len(media.value.media)} media")
        )

        # Creative
        observer.record(StepEvent(index, "create_creative", StepOutcome.STARTED))
        creative = await run_step(
            "create_creative",
            lambda: deps.creatives.create(
                account,
                group.ad_name,
                media.value.media,
                page_id,
                group.primary_text,
                group.headline,
                group.url,
            ),
            CreativeRejectedError,
        )
        if isinstance(creative, StepFailed):
            return fail(creative)
        for warning in creative.value.warnings:
            observer.record(StepEvent(index, "create_creative", StepOutcome.WARNING, warning))
        observer.record(
            StepEvent(
                index,
                "create_creative",
                StepOutcome.SUCCEEDED,
                f"{creative.value.variant} {creative.value.creative_id}",
            )
        )

        # Ad
        observer.record(StepEvent(index, "create_ad", StepOutcome.STARTED))
        ad = await run_step(
            "create_ad",
            lambda: deps.ads.create(
                account,
                ctx.state.ad_set_id,
                creative.value.creative_id,
                group.ad_name,
                ctx.state.scheduled_time,
            ),
            AdCreationError,
        )
        if isinstance(ad, StepFailed):
            return fail(ad)
        observer.record(StepEvent(index, "create_ad", StepOutcome.SUCCEEDED, ad.value))

        group.status = GroupStatus.SUCCESS
        logger.info(f"Created ad {ad.value} for '{group.ad_name}'")
        return AdResult(ad_name=group.ad_name, success=True, ad_id=ad.value)
