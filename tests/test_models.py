from datetime import datetime, timezone

import pytest

from clew.models import Case, CaseStatus, EvidenceItem, TimelineEntry

T0 = datetime(2025, 12, 4, 10, 30, tzinfo=timezone.utc)
T1 = datetime(2025, 12, 4, 11, 0, tzinfo=timezone.utc)


def test_status_values():
    assert CaseStatus("active") is CaseStatus.ACTIVE
    assert CaseStatus("closed") is CaseStatus.CLOSED
    assert str(CaseStatus.CLOSED) == "closed"


def test_status_rejects_unknown():
    with pytest.raises(ValueError):
        CaseStatus("archived")


def test_timeline_display_source_prefers_uri():
    entry = TimelineEntry(type="query", source_uri="cloudwatch:///app/logs", log_group="/old")
    assert entry.display_source() == "cloudwatch:///app/logs"


def test_timeline_display_source_falls_back():
    entry = TimelineEntry(type="query", log_group="/app/logs")
    assert entry.display_source() == "/app/logs"


def test_timeline_round_trip():
    entry = TimelineEntry(
        type="query",
        timestamp=T0,
        source_uri="cloudwatch:///app/logs",
        command="clew query",
        filter="error",
        start_time=T0,
        end_time=T1,
        results=12,
        marked=True,
    )
    assert TimelineEntry.from_dict(entry.to_dict()) == entry


def test_timeline_to_dict_omits_empty_strings():
    data = TimelineEntry(type="note", timestamp=T0, content="hello").to_dict()
    assert "query" not in data
    assert data["content"] == "hello"
    assert data["marked"] is False


def test_timeline_from_dict_accepts_z_suffix():
    entry = TimelineEntry.from_dict({"type": "note", "timestamp": "2025-12-04T10:30:00Z"})
    assert entry.timestamp == T0


def test_evidence_display_fallbacks():
    item = EvidenceItem(ptr="abc", log_group="/app", log_stream="s1")
    assert item.display_source() == "/app"
    assert item.display_stream() == "s1"
    item2 = EvidenceItem(ptr="abc", source_uri="file:///x.log", stream="main", log_stream="s1")
    assert item2.display_source() == "file:///x.log"
    assert item2.display_stream() == "main"


def test_evidence_round_trip():
    item = EvidenceItem(
        ptr="CpMBCmQK",
        message="boom",
        timestamp=T0,
        source_uri="cloudwatch:///app",
        source_type="cloudwatch",
        stream="s",
        collected_at=T1,
        annotation="first error",
        raw_fields={"@message": "boom", "level": "ERROR"},
    )
    assert EvidenceItem.from_dict(item.to_dict()) == item


def test_case_round_trip():
    case = Case(
        id="api-outage",
        title="API outage",
        status=CaseStatus.CLOSED,
        created=T0,
        updated=T1,
        summary="pool exhaustion",
        timeline=[TimelineEntry(type="note", timestamp=T0, content="n")],
        evidence=[EvidenceItem(ptr="p", message="m", timestamp=T0)],
    )
    restored = Case.from_dict(case.to_dict())
    assert restored == case
    assert case.to_dict()["status"] == "closed"


def test_case_from_dict_defaults_to_active():
    case = Case.from_dict({"id": "c1", "title": "t"})
    assert case.status is CaseStatus.ACTIVE
    assert case.timeline == []
    assert case.evidence == []


def test_case_from_dict_requires_id():
    with pytest.raises(ValueError):
        Case.from_dict({"title": "no id"})