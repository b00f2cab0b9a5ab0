"""
Pydantic Graph Pipelines for the ad launcher.

This package contains state-driven workflows using pydantic-graph:
- ad_batch: Clone a template ad set and create one ad per ad group
"""

from .ad_batch import (
    ad_batch_graph,
    run_ad_batch,
    AdBatchPipelineState,
    AdBatchDependencies,
)
from .metadata import NodeMetadata, get_node_metadata, get_pipeline_summary

__all__ = [
    "ad_batch_graph",
    "run_ad_batch",
    "AdBatchPipelineState",
    "AdBatchDependencies",
    "NodeMetadata",
    "get_node_metadata",
    "get_pipeline_summary",
]
