"""Listing and status views of investigation cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from .models import Case, CaseStatus

_STATUS_TIME = "%Y-%m-%d %H:%M:%S"
_LIST_TIME = "%Y-%m-%d %H:%M"
_ZERO_STATUS_TIME = "0001-01-01 00:00:00"
_ZERO_LIST_TIME = "0001-01-01 00:00"
_DIVIDER = "─" * 40

NO_ACTIVE_CASE = "No active case. Use 'clew case new' or 'clew case open' to start."


@dataclass(frozen=True)
class EntryCounts:
    """How many queries, notes and evidence items a case holds."""

    queries: int = 0
    notes: int = 0
    marked: int = 0
    evidence: int = 0


def _format_duration(delta: timedelta) -> str:
    seconds = delta.total_seconds()
    if seconds < 60:
        return f"{int(seconds)}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m"
    if seconds < 86400:
        return f"{seconds / 3600:.1f}h"
    return f"{seconds / 86400:.1f}d"


def _time_text(value: datetime | None, fmt: str, zero: str) -> str:
    return value.strftime(fmt) if value is not None else zero


def filter_cases(cases: Iterable[Case], status: str = "all") -> list[Case]:
    """Keep the cases with the given status; any other status keeps them all."""
    if status == "active":
        return [c for c in cases if c.status == CaseStatus.ACTIVE]
    if status == "closed":
        return [c for c in cases if c.status == CaseStatus.CLOSED]
    return list(cases)


def count_entries(case: Case) -> EntryCounts:
    """Count the case's queries (and marked ones), notes and evidence."""
    queries = sum(1 for e in case.timeline if e.type == "query")
    marked = sum(1 for e in case.timeline if e.type == "query" and e.marked)
    notes = sum(1 for e in case.timeline if e.type == "note")
    return EntryCounts(
        queries=queries, notes=notes, marked=marked, evidence=len(case.evidence)
    )


def format_time_span(case: Case) -> str | None:
    """Time from the first to the last timeline entry, or None when unknown."""
    if not case.timeline:
        return None
    first = case.timeline[0].timestamp
    last = case.timeline[-1].timestamp
    if first is None or last is None:
        return None
    return _format_duration(last - first)


def _sort_key(case: Case) -> datetime:
    updated = case.updated
    if updated is None:
        return datetime.min
    # Compare on the naive wall clock so aware and naive times sort together.
    if updated.tzinfo is not None:
        return updated.replace(tzinfo=None) - (updated.utcoffset() or timedelta(0))
    return updated


def format_case_list(cases: Iterable[Case], active_id: str = "") -> str:
    """Render cases, most recently updated first, marking the active one."""
    ordered = sorted(cases, key=_sort_key, reverse=True)
    blocks = []
    for case in ordered:
        marker = "* " if active_id and case.id == active_id else "  "
        counts = count_entries(case)
        updated = _time_text(case.updated, _LIST_TIME, _ZERO_LIST_TIME)
        blocks.append(
            f"{marker}{case.id}  [{case.status.value}]\n"
            f"    {case.title}\n"
            f"    {updated}  queries: {counts.queries}  notes: {counts.notes}"
            f"  evidence: {counts.evidence}\n"
            "\n"
        )
    return "".join(blocks)


def format_case_status(case: Case | None) -> str:
    """Render a summary of the case, or a hint when there is no active case."""
    if case is None:
        return NO_ACTIVE_CASE + "\n"
    counts = count_entries(case)
    lines = [
        "Active Case",
        "",
        f"  ID:  {case.id}",
        f"  Title:  {case.title}",
        f"  Status:  {case.status.value}",
        f"  Created:  {_time_text(case.created, _STATUS_TIME, _ZERO_STATUS_TIME)}",
        f"  Updated:  {_time_text(case.updated, _STATUS_TIME, _ZERO_STATUS_TIME)}",
    ]
    if case.summary:
        lines += ["", "  Summary:", f"  {case.summary}"]
    lines += [
        "",
        _DIVIDER,
        "Statistics",
        "",
        f"  Queries:    {counts.queries} ({counts.marked} marked)",
        f"  Notes:      {counts.notes}",
        f"  Evidence:   {counts.evidence}",
    ]
    span = format_time_span(case)
    if span is not None:
        lines.append(f"  Time span:  {span}")
    return "\n".join(lines) + "\n"