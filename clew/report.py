"""Investigation reports for a case in Markdown, JSON and Typst/PDF form."""

from __future__ import annotations

import json
import re
import shutil
import subprocess
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable

from .models import Case, TimelineEntry

_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
_ZERO_DISPLAY = "0001-01-01 00:00:00"
_ZERO_JSON = "0001-01-01T00:00:00Z"
_SHOWN_FIELDS = frozenset({"@message", "@timestamp", "@logStream", "@logGroup", "@ptr"})
_TYPST_SPECIAL = re.compile(r"([#$@*_\[\]<>])")
_BREAK_CHARS = frozenset(" \t.,()")
_CONTINUATION = "    "

_TYPST_PREAMBLE = """#set page(margin: 1in)
#set text(size: 11pt)
#set heading(numbering: "1.")

// Make code blocks breakable across pages and use smaller font
#show raw.where(block: true): it => block(
  width: 100%,
  fill: luma(245),
  inset: 8pt,
  radius: 4pt,
  breakable: true,
  text(size: 8pt, it)
)

// Wrap long lines in code blocks
#set raw(theme: none)

"""


class ReportError(Exception):
    """A report could not be produced."""


def _display_time(value: datetime | None) -> str:
    return value.strftime(_DISPLAY_FORMAT) if value is not None else _ZERO_DISPLAY


def _json_time(value: datetime | None) -> str:
    """Render a time the way the case files store it, with 'Z' for UTC."""
    if value is None:
        return _ZERO_JSON
    text = value.isoformat()
    if value.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _truncate(text: str, limit: int = 200) -> str:
    return text[: limit - 3] + "..." if len(text) > limit else text


def _extra_fields(raw: dict[str, str], render: Callable[[str, str], str]) -> list[str]:
    return sorted(
        render(key, value)
        for key, value in raw.items()
        if key not in _SHOWN_FIELDS and value
    )


def escape_typst(text: str) -> str:
    """Escape characters that have a meaning in Typst markup."""
    return _TYPST_SPECIAL.sub(r"\\\1", text)


def _wrap_line(line: str, max_width: int) -> Iterable[str]:
    while len(line) > max_width:
        break_point = max_width
        bp = max_width
        while bp > max_width - 20 and bp > 0:
            # Breaking inside the continuation indent would make no progress.
            if line[bp] in _BREAK_CHARS and bp >= len(_CONTINUATION):
                break_point = bp + 1
                break
            bp -= 1
        yield line[:break_point]
        line = _CONTINUATION + line[break_point:]
    yield line


def wrap_long_lines(text: str, max_width: int) -> str:
    """Wrap lines longer than max_width, indenting the continuations."""
    if max_width <= len(_CONTINUATION):
        raise ValueError(f"max_width must exceed {len(_CONTINUATION)}, got {max_width}")
    return "\n".join(
        wrapped
        for line in text.split("\n")
        for wrapped in _wrap_line(line, max_width)
    )


def filter_timeline(entries: Iterable[TimelineEntry], full: bool) -> list[TimelineEntry]:
    """Keep every entry when full, otherwise marked queries, notes and evidence."""
    return [
        entry
        for entry in entries
        if full or entry.marked or entry.type in ("note", "evidence")
    ]


def resolve_report_format(output_path: str, default_format: str = "md") -> str:
    """Pick the report format from the output file's extension, if it has a known one."""
    if output_path:
        if output_path.endswith(".json"):
            return "json"
        if output_path.endswith((".md", ".markdown")):
            return "md"
        if output_path.endswith(".pdf"):
            return "pdf"
    return default_format


def generate_markdown_report(case: Case, full: bool = False, now: datetime | None = None) -> str:
    """Render the case as a Markdown document."""
    now = now if now is not None else datetime.now()
    parts: list[str] = []
    w = parts.append

    w(f"# {case.title}\n\n")
    w(f"**Case ID:** {case.id}\n\n")
    w(f"**Status:** {case.status.value}\n\n")
    w(f"**Created:** {_display_time(case.created)}\n\n")
    w(f"**Updated:** {_display_time(case.updated)}\n\n")
    w(f"**Generated:** {_display_time(now)}\n\n")

    if case.summary:
        w("## Summary\n\n")
        w(case.summary)
        w("\n\n")

    if case.evidence:
        w("## Key Evidence\n\n")
        for number, item in enumerate(case.evidence, start=1):
            w(f"### Evidence {number}\n\n")
            if item.timestamp is not None:
                w(f"**Timestamp:** {_display_time(item.timestamp)}\n\n")
            w(f"**Source:** {item.display_source()}\n\n")
            stream = item.display_stream()
            if stream:
                w(f"**Stream:** {stream}\n\n")
            if item.annotation:
                w(f"**Annotation:** {item.annotation}\n\n")
            w("**Log Message:**\n```\n")
            w(item.message)
            w("\n```\n\n")
            extra = _extra_fields(item.raw_fields, lambda k, v: f"- **{k}:** `{v}`")
            if extra:
                w("**Additional Fields:**\n\n")
                w("".join(line + "\n" for line in extra))
                w("\n")

    w("## Investigation Timeline\n\n")
    entries = filter_timeline(case.timeline, full)
    if not entries:
        w("_No timeline entries._\n\n")
    for entry in entries:
        ts = _display_time(entry.timestamp)
        if entry.type == "query":
            marker = " [*]" if entry.marked else ""
            w(f"### {ts} - Query{marker}\n\n")
            if entry.command:
                w(f"```\n{entry.command}\n```\n\n")
            source = entry.display_source()
            if source:
                w(f"**Source:** {source}\n\n")
            if entry.filter:
                w(f"**Filter:** `{entry.filter}`\n\n")
            if entry.query:
                w(f"**Query:**\n```\n{entry.query}\n```\n\n")
            w(f"**Results:** {entry.results}\n\n")
        elif entry.type == "note":
            w(f"### {ts} - Note\n\n")
            w(entry.content)
            w("\n\n")
        elif entry.type == "evidence":
            w(f"### {ts} - Evidence Collected\n\n")
            if entry.source:
                w(f"**Source:** {entry.source}\n\n")
            if entry.content:
                w(f"```\n{_truncate(entry.content)}\n```\n\n")

    w("---\n\n")
    w("_Generated by clew_\n")
    return "".join(parts)


def generate_json_report(case: Case, full: bool = False, now: datetime | None = None) -> str:
    """Render the case as an indented JSON document."""
    now = now if now is not None else datetime.now()
    data: dict = {
        "id": case.id,
        "title": case.title,
        "status": case.status.value,
        "created": _json_time(case.created),
        "updated": _json_time(case.updated),
        "generated": _json_time(now),
    }
    if case.summary:
        data["summary"] = case.summary
    if case.evidence:
        data["evidence"] = [item.to_dict() for item in case.evidence]
    timeline = filter_timeline(case.timeline, full)
    if timeline:
        data["timeline"] = [entry.to_dict() for entry in timeline]
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def generate_typst_report(case: Case, full: bool = False, now: datetime | None = None) -> str:
    """Render the case as a Typst source document."""
    now = now if now is not None else datetime.now()
    parts: list[str] = []
    w = parts.append

    w(f'#set document(title: "{escape_typst(case.title)}")\n')
    w(_TYPST_PREAMBLE)
    w(f"= {escape_typst(case.title)}\n\n")
    w(
        "#table(\n"
        "  columns: (auto, 1fr),\n"
        "  stroke: none,\n"
        f"  [*Case ID:*], [{escape_typst(case.id)}],\n"
        f"  [*Status:*], [{escape_typst(case.status.value)}],\n"
        f"  [*Created:*], [{_display_time(case.created)}],\n"
        f"  [*Updated:*], [{_display_time(case.updated)}],\n"
        f"  [*Generated:*], [{_display_time(now)}],\n"
        ")\n\n"
    )

    if case.summary:
        w("== Summary\n\n")
        w(escape_typst(case.summary))
        w("\n\n")

    if case.evidence:
        w("== Key Evidence\n\n")
        for number, item in enumerate(case.evidence, start=1):
            w(f"=== Evidence {number}\n\n")
            if item.timestamp is not None:
                w(f"*Timestamp:* {_display_time(item.timestamp)}\n\n")
            w(f"*Source:* {escape_typst(item.display_source())}\n\n")
            stream = item.display_stream()
            if stream:
                w(f"*Stream:* {escape_typst(stream)}\n\n")
            if item.annotation:
                w(f"*Annotation:* {escape_typst(item.annotation)}\n\n")
            w("*Log Message:*\n```\n")
            w(wrap_long_lines(item.message, 85))
            w("\n```\n\n")
            extra = _extra_fields(
                item.raw_fields,
                lambda k, v: f"- *{escape_typst(k)}:* `{escape_typst(v)}`",
            )
            if extra:
                w("*Additional Fields:*\n\n")
                w("".join(line + "\n" for line in extra))
                w("\n")

    w("== Investigation Timeline\n\n")
    entries = filter_timeline(case.timeline, full)
    if not entries:
        w("_No timeline entries._\n\n")
    for entry in entries:
        ts = _display_time(entry.timestamp)
        if entry.type == "query":
            marker = " (marked)" if entry.marked else ""
            w(f"=== {ts} - Query{marker}\n\n")
            if entry.command:
                w(f"```\n{wrap_long_lines(entry.command, 85)}\n```\n\n")
            source = entry.display_source()
            if source:
                w(f"*Source:* {escape_typst(source)}\n\n")
            if entry.filter:
                w(f"*Filter:* `{escape_typst(entry.filter)}`\n\n")
            if entry.query:
                w(f"*Query:*\n```\n{wrap_long_lines(entry.query, 85)}\n```\n\n")
            w(f"*Results:* {entry.results}\n\n")
        elif entry.type == "note":
            w(f"=== {ts} - Note\n\n")
            w(escape_typst(entry.content))
            w("\n\n")
        elif entry.type == "evidence":
            w(f"=== {ts} - Evidence Collected\n\n")
            if entry.source:
                w(f"*Source:* {escape_typst(entry.source)}\n\n")
            if entry.content:
                w(f"```\n{wrap_long_lines(_truncate(entry.content), 85)}\n```\n\n")

    w("#line(length: 100%)\n")
    w("#text(size: 9pt, fill: gray)[_Generated by clew_]\n")
    return "".join(parts)


def generate_pdf_report(
    case: Case,
    full: bool = False,
    output_path: str = "",
    now: datetime | None = None,
) -> str:
    """Compile the Typst report to PDF with the typst tool; return the PDF path."""
    if shutil.which("typst") is None:
        raise ReportError("typst not found. Install typst or use --format md")
    content = generate_typst_report(case, full, now)
    output_path = str(output_path) if output_path else f"{case.id}.pdf"
    with tempfile.TemporaryDirectory(prefix="clew-report-") as tmp:
        source = Path(tmp) / "report.typ"
        source.write_text(content, encoding="utf-8")
        try:
            subprocess.run(["typst", "compile", str(source), output_path], check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ReportError(f"typst compilation failed: {exc}") from exc
    return output_path