"""
Ad Batch Pipeline Orchestrator - Graph definition and convenience functions.

Defines the pydantic-graph pipeline that turns one template ad plus N ad
groups into one new paused ad set holding N ads, and provides
run_ad_batch() as the main entry point.
"""

import logging
from typing import Any, Optional

from pydantic_graph import Graph

from ...core.observability import get_logfire
from ...services.exceptions import BatchFatalError
from ...services.models import BatchCreateRequest, BatchCreateResult
from .state import AdBatchPipelineState
from .dependencies import AdBatchDependencies
from .nodes.resolve_template import ResolveTemplateNode
from .nodes.duplicate_ad_set import DuplicateAdSetNode
from .nodes.process_groups import ProcessGroupsNode
from .nodes.compile_results import CompileResultsNode

logger = logging.getLogger(__name__)

# ============================================================================
# Graph Definition
# ============================================================================

ad_batch_graph = Graph(
    nodes=(
        ResolveTemplateNode,
        DuplicateAdSetNode,
        ProcessGroupsNode,
        CompileResultsNode,
    ),
    name="ad_batch_pipeline"
)


# ============================================================================
# Convenience Function
# ============================================================================

async def run_ad_batch(
    request: BatchCreateRequest,
    *,
    deps: Optional[AdBatchDependencies] = None,
    observer: Optional[Any] = None,
) -> BatchCreateResult:
    """
    Run the complete ad batch pipeline.

    Args:
        request: Template ad id, new ad set name, optional schedule and
            the ordered ad groups
        deps: Optional AdBatchDependencies (created from the request's
            access token if not provided, and closed afterwards)
        observer: Optional step observer; replaces deps.observer

    Returns:
        BatchCreateResult with the new ad set and one result per group,
        in input order

    Raises:
        TemplateResolutionError: template unreadable or has no page id
        AdSetCreationError: the ad set could not be created
    """
    logger.info(
        f"=== STARTING AD BATCH PIPELINE: {len(request.ads)} ads from template "
        f"{request.template_ad_id} into '{request.new_ad_set_name}' ==="
    )
    if request.scheduled_time:
        logger.info(f"Ads will be scheduled for {request.scheduled_time}")

    owns_deps = deps is None
    if deps is None:
        deps = AdBatchDependencies.create(access_token=request.access_token)
    if observer is not None:
        deps.observer = observer

    state = AdBatchPipelineState.from_request(request)

    try:
        with get_logfire().span("ad_batch_pipeline", template_ad_id=request.template_ad_id):
            result = await ad_batch_graph.run(
                ResolveTemplateNode(),
                state=state,
                deps=deps,
            )
        return result.output

    except BatchFatalError as e:
        logger.error(f"Ad batch pipeline aborted at {state.error_step or state.current_step}: {e}")
        raise

    finally:
        if owns_deps:
            await deps.aclose()
