"""Parsing of timestamps, durations and time windows given on the command line."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)
_NAIVE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?$")

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_NUMBER = re.compile(r"(\d*)(?:\.(\d*))?")
_DURATION_UNIT = re.compile(r"[^\d.]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

TIMESTAMP_ERROR = "invalid timestamp format (use RFC3339: 2025-12-04T10:30:00Z)"


def _build(match: re.Match, tz: timezone) -> datetime:
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    micro = int((fraction + "000000")[:6])
    return datetime(year, month, day, hour, minute, second, micro, tzinfo=tz)


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.match(text)
    if not match:
        raise ValueError(f"cannot parse {text!r} as RFC3339")
    zone = match.group(8)
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return _build(match, tz)


def parse_timestamp(text: str) -> datetime:
    """Parse RFC3339 or a zone-less date-time (read as UTC)."""
    try:
        return _parse_rfc3339(text)
    except ValueError:
        pass
    match = _NAIVE.match(text)
    if match:
        try:
            return _build(match, timezone.utc)
        except ValueError:
            pass
    raise ValueError(TIMESTAMP_ERROR)


def parse_go_duration(text: str) -> timedelta:
    """Parse a duration such as '1h30m', '2.5s' or '-10ms'."""
    original = text
    sign = 1
    if text[:1] in "+-" and text:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {original!r}")
    total_nanos = 0
    while text:
        number = _DURATION_NUMBER.match(text)
        whole, frac = number.group(1), number.group(2)
        if not whole and not frac:
            raise ValueError(f"invalid duration {original!r}")
        text = text[number.end():]
        unit_match = _DURATION_UNIT.match(text)
        if not unit_match:
            raise ValueError(f"missing unit in duration {original!r}")
        unit = unit_match.group(0)
        if unit not in _UNIT_NANOS:
            raise ValueError(f"unknown unit {unit!r} in duration {original!r}")
        text = text[unit_match.end():]
        scale = _UNIT_NANOS[unit]
        total_nanos += int(whole or "0") * scale
        if frac:
            total_nanos += int(frac) * scale // (10 ** len(frac))
    return sign * timedelta(microseconds=total_nanos // 1000)


def parse_duration(text: str) -> timedelta:
    """Parse a duration that may also be given in days, such as '7d'."""
    if text.endswith("d"):
        match = _LEADING_INT.match(text[:-1])
        if not match:
            raise ValueError(f"invalid day count in duration {text!r}")
        return timedelta(days=int(match.group(1)))
    return parse_go_duration(text)


def parse_metrics_time_range(
    start: str, end: str = "", now: datetime | None = None
) -> tuple[datetime, datetime]:
    """Resolve a metrics start (duration or RFC3339) and optional RFC3339 end."""
    end_time = now if now is not None else datetime.now(timezone.utc)
    if end:
        try:
            end_time = _parse_rfc3339(end)
        except ValueError as exc:
            raise ValueError(f"invalid end time: {exc}") from exc
    try:
        return end_time - parse_duration(start), end_time
    except ValueError:
        pass
    try:
        return _parse_rfc3339(start), end_time
    except ValueError:
        raise ValueError(
            f"invalid start time: {start} (use duration like 1h, 24h, 7d or RFC3339 format)"
        ) from None


def around_window(center: datetime, window: str) -> tuple[datetime, datetime]:
    """Return the range extending `window` before and after `center`."""
    try:
        delta = parse_go_duration(window)
    except ValueError as exc:
        raise ValueError(f"invalid window duration: {exc}") from exc
    return center - delta, center + delta


def parse_dimensions(items) -> dict[str, str]:
    """Parse Name=Value dimension filters into a mapping."""
    dimensions: dict[str, str] = {}
    for item in items or ():
        name, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"invalid dimension format: {item} (expected Name=Value)")
        dimensions[name] = value
    return dimensions