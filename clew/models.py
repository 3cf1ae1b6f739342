"""Investigation case data: cases, their timelines and collected evidence."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CaseStatus(str, Enum):
    """Lifecycle state of an investigation case."""

    ACTIVE = "active"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose values are unset or empty, keeping booleans and numbers."""
    return {
        key: value
        for key, value in data.items()
        if value is not None and value != "" and value != {} and value != []
    }


@dataclass
class TimelineEntry:
    """One event in a case timeline: a query, a note or collected evidence."""

    type: str = ""
    timestamp: datetime | None = None
    source_uri: str = ""
    source_type: str = ""
    profile: str = ""
    account_id: str = ""
    log_group: str = ""
    command: str = ""
    filter: str = ""
    query: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    results: int = 0
    marked: bool = False
    content: str = ""
    source: str = ""

    def display_source(self) -> str:
        """The source URI, falling back to the older log group field."""
        return self.source_uri or self.log_group

    def to_dict(self) -> dict[str, Any]:
        data = _compact(
            {
                "type": self.type,
                "timestamp": _format_time(self.timestamp),
                "source_uri": self.source_uri,
                "source_type": self.source_type,
                "profile": self.profile,
                "account_id": self.account_id,
                "log_group": self.log_group,
                "command": self.command,
                "filter": self.filter,
                "query": self.query,
                "start_time": _format_time(self.start_time),
                "end_time": _format_time(self.end_time),
                "content": self.content,
                "source": self.source,
            }
        )
        data["results"] = self.results
        data["marked"] = self.marked
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimelineEntry:
        return cls(
            type=data.get("type", "") or "",
            timestamp=_parse_time(data.get("timestamp")),
            source_uri=data.get("source_uri", "") or "",
            source_type=data.get("source_type", "") or "",
            profile=data.get("profile", "") or "",
            account_id=data.get("account_id", "") or "",
            log_group=data.get("log_group", "") or "",
            command=data.get("command", "") or "",
            filter=data.get("filter", "") or "",
            query=data.get("query", "") or "",
            start_time=_parse_time(data.get("start_time")),
            end_time=_parse_time(data.get("end_time")),
            results=int(data.get("results", 0) or 0),
            marked=bool(data.get("marked", False)),
            content=data.get("content", "") or "",
            source=data.get("source", "") or "",
        )


@dataclass
class EvidenceItem:
    """A log record saved into a case as evidence."""

    ptr: str = ""
    message: str = ""
    timestamp: datetime | None = None
    source_uri: str = ""
    source_type: str = ""
    stream: str = ""
    profile: str = ""
    account_id: str = ""
    log_group: str = ""
    log_stream: str = ""
    collected_at: datetime | None = None
    annotation: str = ""
    raw_fields: dict[str, str] = field(default_factory=dict)

    def display_source(self) -> str:
        """The source URI, falling back to the older log group field."""
        return self.source_uri or self.log_group

    def display_stream(self) -> str:
        """The stream, falling back to the older log stream field."""
        return self.stream or self.log_stream

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "ptr": self.ptr,
                "message": self.message,
                "timestamp": _format_time(self.timestamp),
                "source_uri": self.source_uri,
                "source_type": self.source_type,
                "stream": self.stream,
                "profile": self.profile,
                "account_id": self.account_id,
                "log_group": self.log_group,
                "log_stream": self.log_stream,
                "collected_at": _format_time(self.collected_at),
                "annotation": self.annotation,
                "raw_fields": dict(self.raw_fields),
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EvidenceItem:
        raw = data.get("raw_fields") or {}
        return cls(
            ptr=data.get("ptr", "") or "",
            message=data.get("message", "") or "",
            timestamp=_parse_time(data.get("timestamp")),
            source_uri=data.get("source_uri", "") or "",
            source_type=data.get("source_type", "") or "",
            stream=data.get("stream", "") or "",
            profile=data.get("profile", "") or "",
            account_id=data.get("account_id", "") or "",
            log_group=data.get("log_group", "") or "",
            log_stream=data.get("log_stream", "") or "",
            collected_at=_parse_time(data.get("collected_at")),
            annotation=data.get("annotation", "") or "",
            raw_fields={str(k): str(v) for k, v in raw.items()},
        )


@dataclass
class Case:
    """An investigation case with its timeline and evidence."""

    id: str
    title: str = ""
    status: CaseStatus = CaseStatus.ACTIVE
    created: datetime | None = None
    updated: datetime | None = None
    summary: str = ""
    timeline: list[TimelineEntry] = field(default_factory=list)
    evidence: list[EvidenceItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "created": _format_time(self.created),
            "updated": _format_time(self.updated),
        }
        if self.summary:
            data["summary"] = self.summary
        data["timeline"] = [entry.to_dict() for entry in self.timeline]
        data["evidence"] = [item.to_dict() for item in self.evidence]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Case:
        if "id" not in data or not data["id"]:
            raise ValueError("case data has no id")
        return cls(
            id=str(data["id"]),
            title=data.get("title", "") or "",
            status=CaseStatus(data.get("status") or CaseStatus.ACTIVE.value),
            created=_parse_time(data.get("created")),
            updated=_parse_time(data.get("updated")),
            summary=data.get("summary", "") or "",
            timeline=[TimelineEntry.from_dict(e) for e in data.get("timeline") or []],
            evidence=[EvidenceItem.from_dict(e) for e in data.get("evidence") or []],
        )