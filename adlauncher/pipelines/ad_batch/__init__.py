"""
Ad Batch Pipeline - one template ad in, one new ad set with N ads out.

Steps:
    1. ResolveTemplateNode   - read template ad, page id and ad set
    2. DuplicateAdSetNode    - create the paused ad-set clone
    3. ProcessGroupsNode     - media -> creative -> ad, per group, in order
    4. CompileResultsNode    - BatchCreateResult
"""

from .orchestrator import ad_batch_graph, run_ad_batch
from .state import AdBatchPipelineState
from .dependencies import AdBatchDependencies
from .observer import LoggingObserver, PipelineObserver, RecordingObserver, StepEvent, StepOutcome
from .nodes import (
    ResolveTemplateNode,
    DuplicateAdSetNode,
    ProcessGroupsNode,
    CompileResultsNode,
)

__all__ = [
    "ad_batch_graph",
    "run_ad_batch",
    "AdBatchPipelineState",
    "AdBatchDependencies",
    "LoggingObserver",
    "PipelineObserver",
    "RecordingObserver",
    "StepEvent",
    "StepOutcome",
    "ResolveTemplateNode",
    "DuplicateAdSetNode",
    "ProcessGroupsNode",
    "CompileResultsNode",
]
