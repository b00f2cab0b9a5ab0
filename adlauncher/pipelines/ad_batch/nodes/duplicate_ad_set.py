"""
DuplicateAdSetNode - create the single paused ad set shared by the batch.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar

from pydantic_graph import BaseNode, GraphRunContext

from ..state import AdBatchPipelineState
from ..dependencies import AdBatchDependencies
from ..observer import StepEvent, StepOutcome
from ...metadata import NodeMetadata
from ....core.observability import get_logfire
from ....services.exceptions import AdSetCreationError

logger = logging.getLogger(__name__)


@dataclass
class DuplicateAdSetNode(BaseNode[AdBatchPipelineState]):
    """
    Step 2: Clone the template ad set under the new name.

    Runs exactly once per batch. Failure aborts the batch before any ad
    is attempted.

    Reads: template, new_ad_set_name
    Writes: ad_set_id
    Services: AdSetDuplicator.duplicate()
    """

    metadata: ClassVar[NodeMetadata] = NodeMetadata(
        inputs=["template", "new_ad_set_name"],
        outputs=["ad_set_id"],
        services=["ad_sets.duplicate"],
        fatal=True,
    )

    async def run(
        self,
        ctx: GraphRunContext[AdBatchPipelineState, AdBatchDependencies]
    ) -> "ProcessGroupsNode":
        from .process_groups import ProcessGroupsNode

        logger.info(f"Step 2: Duplicating ad set as '{ctx.state.new_ad_set_name}'...")
        ctx.state.current_step = "duplicate_ad_set"
        observer = ctx.deps.observer
        observer.record(StepEvent(None, "duplicate_ad_set", StepOutcome.STARTED))

        template = ctx.state.template
        try:
            with get_logfire().span("duplicate_ad_set", ad_set_name=ctx.state.new_ad_set_name):
                ctx.state.ad_set_id = await ctx.deps.ad_sets.duplicate(
                    template.ad_account_id,
                    template.ad_set_config,
                    ctx.state.new_ad_set_name,
                )
        except AdSetCreationError as e:
            ctx.state.mark_failed("duplicate_ad_set", e)
            observer.record(StepEvent(None, "duplicate_ad_set", StepOutcome.FAILED, str(e)))
            raise

        observer.record(
            StepEvent(None, "duplicate_ad_set", StepOutcome.SUCCEEDED, ctx.state.ad_set_id)
        )
        ctx.state.mark_step_complete("duplicate_ad_set")
        return ProcessGroupsNode()
