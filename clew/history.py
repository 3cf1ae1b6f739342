"""Query history: the record of recently run queries, newest first."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Sequence

DEFAULT_MAX_ENTRIES = 50
HISTORY_FILENAME = ".clew_history.json"

_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
_ZERO_DISPLAY = "0001-01-01 00:00:00"
_ZERO_JSON = "0001-01-01T00:00:00Z"
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def _time_to_json(value: datetime | None) -> str:
    if value is None:
        return _ZERO_JSON
    text = value.isoformat()
    if value.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _time_from_json(value: Any) -> datetime | None:
    if value is None or value == "" or value == _ZERO_JSON:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _LONG_FRACTION.sub(r"\1", text)
    return datetime.fromisoformat(text)


@dataclass
class HistoryEntry:
    """One query that was run, with what is needed to run it again."""

    timestamp: datetime | None = None
    source_uri: str = ""
    source_type: str = ""
    profile: str = ""
    account_id: str = ""
    log_groups: list[str] = field(default_factory=list)
    start_time: str = ""
    end_time: str = ""
    filter: str = ""
    query: str = ""
    result_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": _time_to_json(self.timestamp)}
        optional = {
            "source_uri": self.source_uri,
            "source_type": self.source_type,
            "profile": self.profile,
            "account_id": self.account_id,
            "log_groups": list(self.log_groups),
        }
        data.update({k: v for k, v in optional.items() if v})
        data["start_time"] = self.start_time
        optional = {
            "end_time": self.end_time,
            "filter": self.filter,
            "query": self.query,
            "result_count": self.result_count,
        }
        data.update({k: v for k, v in optional.items() if v})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        if not isinstance(data, dict):
            raise ValueError("history entry is not an object")
        return cls(
            timestamp=_time_from_json(data.get("timestamp")),
            source_uri=data.get("source_uri") or "",
            source_type=data.get("source_type") or "",
            profile=data.get("profile") or "",
            account_id=data.get("account_id") or "",
            log_groups=[str(g) for g in data.get("log_groups") or []],
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
            filter=data.get("filter") or "",
            query=data.get("query") or "",
            result_count=int(data.get("result_count") or 0),
        )

    def rerun_source(self) -> str:
        """The source URI to query again, built from log groups for older entries."""
        if self.source_uri:
            return self.source_uri
        if self.log_groups:
            uri = "cloudwatch://" + self.log_groups[0]
            if self.profile:
                uri += "?profile=" + self.profile
            return uri
        raise ValueError("history entry has no source URI or log groups")


class HistoryStore:
    """The history file, holding at most max_entries queries."""

    def __init__(self, path: str | os.PathLike, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.path = Path(path)
        self.max_entries = max_entries if max_entries and max_entries > 0 else DEFAULT_MAX_ENTRIES

    def load(self) -> list[HistoryEntry]:
        """All stored entries, newest first; empty when there is no file."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise OSError(f"failed to read history: {exc}") from exc
        try:
            data = json.loads(text)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError("expected a list of entries")
            return [HistoryEntry.from_dict(item) for item in data]
        except (ValueError, TypeError) as exc:
            raise ValueError(f"failed to parse history: {exc}") from exc

    def add(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """Store entry as the newest, dropping the oldest beyond the limit."""
        if entry.timestamp is None:
            entry = replace(entry, timestamp=datetime.now().astimezone())
        try:
            entries = self.load()
        except (OSError, ValueError):
            entries = []
        entries = [entry, *entries][: self.max_entries]
        text = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        return entries

    def clear(self) -> None:
        """Remove the history file, if there is one."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise OSError(f"failed to clear history: {exc}") from exc

    def get(self, number: int) -> HistoryEntry:
        """The entry numbered from 1, newest first."""
        entries = self.load()
        if number < 1 or number > len(entries):
            raise IndexError(
                f"query #{number} not found (history has {len(entries)} entries)"
            )
        return entries[number - 1]


def history_file_path(configured: str = "", home: str | os.PathLike | None = None) -> Path:
    """The configured history file with '~' expanded, or the default one in home."""
    base = Path(home) if home is not None else Path.home()
    if configured:
        if configured.startswith("~"):
            return base / configured[1:].lstrip("/\\")
        return Path(configured)
    return base / HISTORY_FILENAME


def format_log_groups(groups: Sequence[str]) -> str:
    """The first log group, with a count of any others."""
    if not groups:
        return ""
    if len(groups) == 1:
        return groups[0]
    return f"{groups[0]} (+{len(groups) - 1} more)"


def truncate_string(text: str, max_len: int) -> str:
    """Cut text longer than max_len to max_len characters ending in '...'."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_history_line(number: int, entry: HistoryEntry) -> str:
    """One line of the history listing."""
    ts = entry.timestamp.strftime(_DISPLAY_FORMAT) if entry.timestamp else _ZERO_DISPLAY
    if entry.source_uri:
        source = truncate_string(entry.source_uri, 40)
    else:
        source = truncate_string(format_log_groups(entry.log_groups), 40)
    if entry.query:
        query_info = "-q (custom)"
    elif entry.filter:
        query_info = "-f " + json.dumps(truncate_string(entry.filter, 30), ensure_ascii=False)
    else:
        query_info = ""
    result_info = f"({entry.result_count} results)" if entry.result_count > 0 else ""
    return f"[{number}] {ts}  {source}  {query_info}  -s {entry.start_time}  {result_info}"