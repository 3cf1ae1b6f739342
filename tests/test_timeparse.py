from datetime import datetime, timedelta, timezone

import pytest

from clew.timeparse import (
    around_window,
    parse_dimensions,
    parse_duration,
    parse_go_duration,
    parse_metrics_time_range,
    parse_timestamp,
)


@pytest.mark.parametrize(
    "text",
    ["2025-12-03T10:00:00Z", "2025-12-03T10:00:00-05:00", "2025-12-03 10:00:00.000"],
)
def test_parse_timestamp_valid(text):
    result = parse_timestamp(text)
    assert (result.year, result.month, result.day, result.hour) == (2025, 12, 3, 10)


def test_parse_timestamp_invalid():
    with pytest.raises(ValueError, match="invalid timestamp format"):
        parse_timestamp("not a timestamp")


def test_parse_timestamp_offset_preserved():
    result = parse_timestamp("2025-12-03T10:00:00-05:00")
    assert result == datetime(2025, 12, 3, 15, 0, tzinfo=timezone.utc)


def test_parse_timestamp_naive_is_utc():
    result = parse_timestamp("2025-12-03T10:00:00")
    assert result == datetime(2025, 12, 3, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("5m", timedelta(minutes=5)),
        ("1h", timedelta(hours=1)),
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["abc", "d", "", "5"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_go_duration_compound():
    assert parse_go_duration("1h30m") == timedelta(hours=1, minutes=30)
    assert parse_go_duration("1.5s") == timedelta(seconds=1.5)
    assert parse_go_duration("-10ms") == timedelta(milliseconds=-10)
    assert parse_go_duration("0") == timedelta(0)


def test_parse_go_duration_rejects_days_and_unknown_units():
    with pytest.raises(ValueError):
        parse_go_duration("7d")
    with pytest.raises(ValueError):
        parse_go_duration("1x")


def test_around_window():
    center = datetime(2025, 12, 4, 10, 30, tzinfo=timezone.utc)
    start, end = around_window(center, "5m")
    assert start == center - timedelta(minutes=5)
    assert end == center + timedelta(minutes=5)


def test_around_window_invalid():
    with pytest.raises(ValueError, match="invalid window duration"):
        around_window(datetime(2025, 1, 1, tzinfo=timezone.utc), "soon")


def test_metrics_range_relative():
    now = datetime(2025, 12, 4, 12, 0, tzinfo=timezone.utc)
    start, end = parse_metrics_time_range("24h", "", now)
    assert end == now
    assert end - start == timedelta(hours=24)


def test_metrics_range_explicit_end_and_rfc3339_start():
    start, end = parse_metrics_time_range("2025-12-01T00:00:00Z", "2025-12-02T00:00:00Z")
    assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert end == datetime(2025, 12, 2, tzinfo=timezone.utc)


def test_metrics_range_days_from_end():
    start, end = parse_metrics_time_range("7d", "2025-12-08T00:00:00Z")
    assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)


def test_metrics_range_errors():
    with pytest.raises(ValueError, match="invalid start time"):
        parse_metrics_time_range("yesterday")
    with pytest.raises(ValueError, match="invalid end time"):
        parse_metrics_time_range("1h", "2025-12-02")


def test_parse_dimensions():
    dims = parse_dimensions(["LoadBalancer=app/my-alb/abc123", "Key=a=b"])
    assert dims == {"LoadBalancer": "app/my-alb/abc123", "Key": "a=b"}
    assert parse_dimensions(None) == {}


def test_parse_dimensions_invalid():
    with pytest.raises(ValueError, match="expected Name=Value"):
        parse_dimensions(["NoEquals"])