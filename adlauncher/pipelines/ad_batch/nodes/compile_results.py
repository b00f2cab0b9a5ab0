"""
CompileResultsNode - aggregate per-ad outcomes into the batch result.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar

from pydantic_graph import BaseNode, End, GraphRunContext

from ..state import AdBatchPipelineState
from ..dependencies import AdBatchDependencies
from ...metadata import NodeMetadata
from ....services.models import BatchCreateResult

logger = logging.getLogger(__name__)


@dataclass
class CompileResultsNode(BaseNode[AdBatchPipelineState]):
    """
    Step 4: Return the shared ad set plus one result per input group.

    Reads: ad_set_id, new_ad_set_name, results
    Writes: (none - returns End with BatchCreateResult)
    """

    metadata: ClassVar[NodeMetadata] = NodeMetadata(
        inputs=["ad_set_id", "new_ad_set_name", "results"],
        outputs=[],
    )

    async def run(
        self,
        ctx: GraphRunContext[AdBatchPipelineState, AdBatchDependencies]
    ) -> End[BatchCreateResult]:
        ctx.state.current_step = "compile_results"

        result = BatchCreateResult(
            ad_set_id=ctx.state.ad_set_id,
            ad_set_name=ctx.state.new_ad_set_name,
            results=list(ctx.state.results),
        )

        ctx.state.mark_step_complete("compile_results")
        logger.info(
            f"=== BATCH COMPLETE: ad set {result.ad_set_id}, "
            f"{result.success_count} created, {result.failure_count} failed ==="
        )
        return End(result)
