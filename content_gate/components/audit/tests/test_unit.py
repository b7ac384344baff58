"""
Unit tests for the audit component.
"""

import logging
from datetime import UTC, datetime

import pytest

from content_gate.components.audit import (
    AccessAuditor,
    AuditConfig,
    AuditRecord,
    RequestContext,
)
from content_gate.domain.entities import AccessDecision, RequiredAction
from content_gate.domain.errors import AuditWriteFailure

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


class MockTimePort:
    def now_utc(self) -> datetime:
        return FIXED_NOW


class RecordingSink:
    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def record(self, entry: AuditRecord) -> None:
        self.records.append(entry)


class FailingSink:
    def record(self, entry: AuditRecord) -> None:
        raise AuditWriteFailure("sink offline")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def auditor(sink: RecordingSink) -> AccessAuditor:
    return AccessAuditor(sink=sink, time_port=MockTimePort())


class TestAccessAuditor:
    """Tests for AccessAuditor."""

    def test_record_builds_entry(self, auditor: AccessAuditor, sink: RecordingSink) -> None:
        context = RequestContext(ip_address="10.0.0.1", user_agent="pytest")
        entry = auditor.record(
            user_id="u1",
            resource="article",
            action="read",
            allowed=False,
            resource_id="18",
            reason="Premium subscription required",
            context=context,
        )
        assert entry is not None
        assert sink.records == [entry]
        assert entry.timestamp == FIXED_NOW
        assert entry.request_context.ip_address == "10.0.0.1"

    def test_default_context(self, auditor: AccessAuditor) -> None:
        entry = auditor.record(user_id=None, resource="forum", action="read", allowed=True)
        assert entry is not None
        assert entry.request_context == RequestContext()

    def test_record_decision(self, auditor: AccessAuditor, sink: RecordingSink) -> None:
        decision = AccessDecision(
            allowed=False,
            reason="Authentication required",
            required_action=RequiredAction.LOGIN,
        )
        auditor.record_decision(decision, user_id=None, resource="video", action="access")
        assert sink.records[0].allowed is False
        assert sink.records[0].reason == "Authentication required"

    def test_record_authentication(self, auditor: AccessAuditor, sink: RecordingSink) -> None:
        auditor.record_authentication("u1", "http://testserver/api/preview/v1")
        entry = sink.records[0]
        assert entry.resource == "api"
        assert entry.action == "authenticate"
        assert entry.allowed is True
        assert entry.resource_id == "http://testserver/api/preview/v1"

    def test_sink_failure_swallowed(self, caplog: pytest.LogCaptureFixture) -> None:
        """A broken sink is logged, never raised."""
        auditor = AccessAuditor(sink=FailingSink(), time_port=MockTimePort())
        with caplog.at_level(logging.ERROR):
            result = auditor.record(user_id="u1", resource="article", action="read", allowed=True)
        assert result is None
        assert "Audit log error" in caplog.text

    def test_disabled_records_nothing(self, sink: RecordingSink) -> None:
        auditor = AccessAuditor(sink=sink, config=AuditConfig(enabled=False))
        assert auditor.record(user_id="u1", resource="article", action="read", allowed=True) is None
        assert sink.records == []

    def test_should_record(self, sink: RecordingSink) -> None:
        default = AccessAuditor(sink=sink)
        assert default.should_record(informational=False) is True
        assert default.should_record(informational=True) is False

        verbose = AccessAuditor(sink=sink, config=AuditConfig(log_informational=True))
        assert verbose.should_record(informational=True) is True

        disabled = AccessAuditor(sink=sink, config=AuditConfig(enabled=False))
        assert disabled.should_record(informational=False) is False


class TestAuditRecord:
    """Tests for AuditRecord serialization."""

    def test_to_dict(self) -> None:
        entry = AuditRecord(
            user_id="u1",
            resource="article",
            action="read",
            allowed=True,
            timestamp=FIXED_NOW,
            resource_id="3",
        )
        data = entry.to_dict()
        assert data["timestamp"] == FIXED_NOW.isoformat()
        assert data["request_context"]["ip_address"] == "unknown"
        assert data["resource_id"] == "3"

    def test_ids_unique(self) -> None:
        a = AuditRecord(user_id=None, resource="x", action="y", allowed=True, timestamp=FIXED_NOW)
        b = AuditRecord(user_id=None, resource="x", action="y", allowed=True, timestamp=FIXED_NOW)
        assert a.id != b.id
