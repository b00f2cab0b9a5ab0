"""
Tests for pipeline observers.
"""

import logging

from adlauncher.pipelines.ad_batch.observer import (
    LoggingObserver,
    RecordingObserver,
    StepEvent,
    StepOutcome,
)


class TestRecordingObserver:

    def test_filters_by_group_and_outcome(self):
        observer = RecordingObserver()
        observer.record(StepEvent(None, "duplicate_ad_set", StepOutcome.SUCCEEDED))
        observer.record(StepEvent(0, "create_ad", StepOutcome.SUCCEEDED))
        observer.record(StepEvent(1, "create_creative", StepOutcome.FAILED, "rejected"))

        assert [e.step for e in observer.for_group(1)] == ["create_creative"]
        assert observer.steps(StepOutcome.FAILED) == ["create_creative"]
        assert len(observer.steps()) == 3

    def test_events_are_timestamped(self):
        event = StepEvent(0, "create_ad", StepOutcome.STARTED)
        assert event.at.tzinfo is not None


class TestLoggingObserver:

    def test_failure_logged_as_error(self, caplog):
        with caplog.at_level(logging.INFO, logger="adlauncher.pipelines.ad_batch.observer"):
            LoggingObserver().record(StepEvent(2, "create_ad", StepOutcome.FAILED, "archived"))

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "[group 2] create_ad: failed - archived" in record.getMessage()

    def test_batch_scope_and_warning_level(self, caplog):
        with caplog.at_level(logging.INFO, logger="adlauncher.pipelines.ad_batch.observer"):
            LoggingObserver().record(StepEvent(None, "resolve_template", StepOutcome.WARNING))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "[batch] resolve_template: warning"
