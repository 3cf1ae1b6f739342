"""Timeline and evidence views of a case, and gathering of note text."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import IO, Iterable, Sequence

from .models import Case, EvidenceItem, TimelineEntry

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_ZERO_TIME = "0001-01-01 00:00:00"

NO_TIMELINE_ENTRIES = "No timeline entries found."
NO_EVIDENCE = "No evidence collected."


def _time_text(value: datetime | None) -> str:
    return value.strftime(_TIME_FORMAT) if value is not None else _ZERO_TIME


def truncate_content(text: str, limit: int) -> str:
    """Shorten text longer than limit to limit characters ending in '...'."""
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def _type_label(entry: TimelineEntry) -> str:
    if entry.type == "query":
        return "[*] QUERY" if entry.marked else "QUERY"
    if entry.type == "note":
        return "NOTE"
    if entry.type == "evidence":
        return "EVIDENCE"
    return entry.type


def _entry_lines(entry: TimelineEntry) -> list[str]:
    lines = [f"  {_time_text(entry.timestamp)}  {_type_label(entry)}"]
    if entry.type == "query":
        if entry.command:
            lines.append(f"    {entry.command}")
        source = entry.display_source()
        if source:
            lines.append(f"    Source: {source}")
        if entry.filter:
            lines.append(f"    Filter: {entry.filter}")
        if entry.query:
            lines.append(f"    Query: {entry.query}")
        lines.append(f"    Results: {entry.results}")
    elif entry.type == "note":
        lines.append(f"    {entry.content}")
        if entry.source:
            lines.append(f"    Source: {entry.source}")
    elif entry.type == "evidence":
        if entry.content:
            lines.append(f"    {truncate_content(entry.content, 100)}")
        if entry.source:
            lines.append(f"    Source: {entry.source}")
    lines.append("")
    return lines


def format_timeline(case: Case | None, entries: Iterable[TimelineEntry]) -> str:
    """Render timeline entries of the case, one block per entry."""
    if case is None:
        raise ValueError("no active case")
    entries = list(entries)
    if not entries:
        return NO_TIMELINE_ENTRIES + "\n"
    lines = [f"Timeline: {case.title}", ""]
    for entry in entries:
        lines.extend(_entry_lines(entry))
    return "\n".join(lines) + "\n"


def _evidence_lines(number: int, item: EvidenceItem) -> list[str]:
    lines = [f"  Evidence {number}"]
    if item.timestamp is not None:
        lines.append(f"    Timestamp:  {_time_text(item.timestamp)}")
    lines.append(f"    Source:     {item.display_source()}")
    stream = item.display_stream()
    if stream:
        lines.append(f"    Stream:     {stream}")
    lines.append(f"    Message:    {truncate_content(item.message, 200)}")
    if item.annotation:
        lines.append(f"    Annotation:  {item.annotation}")
    lines.append(f"    @ptr:       {truncate_content(item.ptr, 40)}")
    lines.append("")
    return lines


def format_evidence(case: Case | None, evidence: Iterable[EvidenceItem]) -> str:
    """Render the evidence collected in the case, numbered from 1."""
    items = list(evidence)
    if not items:
        return NO_EVIDENCE + "\n"
    title = case.title if case is not None else ""
    lines = [f"Evidence: {title}", ""]
    for number, item in enumerate(items, start=1):
        lines.extend(_evidence_lines(number, item))
    return "\n".join(lines) + "\n"


def _default_editor() -> str:
    return os.environ.get("EDITOR") or os.environ.get("VISUAL") or "vi"


def open_editor(initial: str = "", editor: str | None = None) -> str:
    """Let the user edit text in an editor and return what was saved."""
    program = editor or _default_editor()
    fd, name = tempfile.mkstemp(prefix="clew-", suffix=".md")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            if initial:
                handle.write(initial)
        try:
            subprocess.run([program, str(path)], check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise RuntimeError(f"editor failed: {exc}") from exc
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"failed to read edited file: {exc}") from exc
    finally:
        path.unlink(missing_ok=True)


def read_text_input(
    args: Sequence[str] = (),
    file: str | None = None,
    use_editor: bool = False,
    stdin: IO[str] | None = None,
) -> tuple[str, str]:
    """Gather text from a file, an editor, arguments or piped stdin.

    Returns the text and where it came from: 'file:<path>', 'editor',
    'inline' or 'stdin'.
    """
    if file:
        try:
            data = Path(file).read_text(encoding="utf-8")
        except OSError as exc:
            raise OSError(f"failed to read file: {exc}") from exc
        return data.strip(), f"file:{file}"
    if use_editor:
        return open_editor("").strip(), "editor"
    if args:
        return " ".join(args), "inline"
    stream = stdin if stdin is not None else sys.stdin
    isatty = getattr(stream, "isatty", None)
    if stream is None or (isatty is not None and isatty()):
        raise ValueError(
            "no content provided. Use: <text>, -F <file>, -e, or pipe from stdin"
        )
    return stream.read().strip(), "stdin"


def confirm_delete(answer: str) -> bool:
    """Whether a prompt answer confirms deletion ('y' or 'yes', any case)."""
    return answer.strip().lower() in ("y", "yes")