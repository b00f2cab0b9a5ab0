"""
Pipeline observers - structured step events, decoupled from any sink.

Every step of a batch reports a StepEvent. Batch-level steps
(resolve_template, duplicate_ad_set) carry group_index=None.

    observer = RecordingObserver()
    result = await run_ad_batch(request, observer=observer)
    observer.for_group(1)   # -> events for the second ad
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from ...core.observability import get_logfire

logger = logging.getLogger(__name__)


class StepOutcome:
    """Outcome constants for StepEvent.outcome."""
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    WARNING = "warning"


@dataclass(frozen=True)
class StepEvent:
    group_index: Optional[int]
    step: str
    outcome: str
    detail: Optional[str] = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PipelineObserver(Protocol):
    def record(self, event: StepEvent) -> None: ...


class LoggingObserver:
    """Default observer: stdlib logging, mirrored to Logfire when configured."""

    def record(self, event: StepEvent) -> None:
        scope = "batch" if event.group_index is None else f"group {event.group_index}"
        message = f"[{scope}] {event.step}: {event.outcome}"
        if event.detail:
            message += f" - {event.detail}"

        if event.outcome == StepOutcome.FAILED:
            logger.error(message)
        elif event.outcome in (StepOutcome.WARNING, StepOutcome.SKIPPED):
            logger.warning(message)
        else:
            logger.info(message)

        get_logfire().info(
            "ad batch step {step} {outcome}",
            step=event.step,
            outcome=event.outcome,
            group_index=event.group_index,
            detail=event.detail,
        )


class RecordingObserver:
    """Keeps every event in memory."""

    def __init__(self):
        self.events: List[StepEvent] = []

    def record(self, event: StepEvent) -> None:
        self.events.append(event)

    def for_group(self, group_index: int) -> List[StepEvent]:
        return [e for e in self.events if e.group_index == group_index]

    def steps(self, outcome: Optional[str] = None) -> List[str]:
        return [e.step for e in self.events if outcome is None or e.outcome == outcome]
