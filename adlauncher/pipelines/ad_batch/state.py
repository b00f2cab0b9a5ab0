"""
Ad Batch Pipeline State - dataclass passed through all pipeline nodes.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...services.models import AdGroup, AdResult, BatchCreateRequest, TemplateContext


@dataclass
class AdBatchPipelineState:
    """
    State passed through all ad batch pipeline nodes.

    Lifecycle:
        1. Caller creates it from a BatchCreateRequest
        2. ResolveTemplateNode -> DuplicateAdSetNode run once
        3. ProcessGroupsNode walks `groups` in order, filling `results`
        4. CompileResultsNode returns the BatchCreateResult via End()
    """

    # === REQUIRED INPUT ===
    template_ad_id: str
    new_ad_set_name: str

    # === CONFIGURATION (set at creation, not changed by nodes) ===
    scheduled_time: Optional[str] = None
    groups: List[AdGroup] = field(default_factory=list)

    # === POPULATED BY NODES ===

    # ResolveTemplateNode
    template: Optional[TemplateContext] = None

    # DuplicateAdSetNode
    ad_set_id: Optional[str] = None

    # ProcessGroupsNode (same order as groups)
    results: List[AdResult] = field(default_factory=list)

    # === TRACKING ===
    current_step: str = "pending"
    error: Optional[str] = None
    error_step: Optional[str] = None

    @classmethod
    def from_request(cls, request: BatchCreateRequest) -> "AdBatchPipelineState":
        return cls(
            template_ad_id=request.template_ad_id,
            new_ad_set_name=request.new_ad_set_name,
            scheduled_time=request.scheduled_time,
            groups=[ad.to_group() for ad in request.ads],
        )

    def mark_step_complete(self, step_name: str) -> None:
        """Mark a step as complete and update current_step."""
        self.current_step = f"{step_name}_complete"

    def mark_failed(self, step_name: str, error: Exception) -> None:
        self.error = str(error)
        self.error_step = step_name
        self.current_step = f"{step_name}_failed"
