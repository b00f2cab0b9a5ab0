"""
ResolveTemplateNode - read the template ad, its page and its ad set.
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
from ....services.exceptions import TemplateResolutionError

logger = logging.getLogger(__name__)


@dataclass
class ResolveTemplateNode(BaseNode[AdBatchPipelineState]):
    """
    Step 1: Resolve the template ad.

    Nothing has been written upstream yet, so a failure here leaves no
    trace on the ad account.

    Reads: template_ad_id
    Writes: template
    Services: TemplateResolver.resolve()
    """

    metadata: ClassVar[NodeMetadata] = NodeMetadata(
        inputs=["template_ad_id"],
        outputs=["template"],
        services=["templates.resolve"],
        fatal=True,
    )

    async def run(
        self,
        ctx: GraphRunContext[AdBatchPipelineState, AdBatchDependencies]
    ) -> "DuplicateAdSetNode":
        from .duplicate_ad_set import DuplicateAdSetNode

        logger.info(f"Step 1: Resolving template ad {ctx.state.template_ad_id}...")
        ctx.state.current_step = "resolve_template"
        observer = ctx.deps.observer
        observer.record(StepEvent(None, "resolve_template", StepOutcome.STARTED))

        try:
            with get_logfire().span("resolve_template", template_ad_id=ctx.state.template_ad_id):
                ctx.state.template = await ctx.deps.templates.resolve(ctx.state.template_ad_id)
        except TemplateResolutionError as e:
            ctx.state.mark_failed("resolve_template", e)
            observer.record(StepEvent(None, "resolve_template", StepOutcome.FAILED, str(e)))
            raise

        observer.record(
            StepEvent(None, "resolve_template", StepOutcome.SUCCEEDED, ctx.state.template.page_id)
        )
        ctx.state.mark_step_complete("resolve_template")
        return DuplicateAdSetNode()
