"""Discovery of the fields present in sampled log records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

SAMPLE_WIDTH = 60
_INT64_LIMIT = 2**63


@dataclass
class FieldStats:
    """How often a field appeared and the first non-empty value seen for it."""

    count: int = 0
    sample_value: str = ""

    def record(self, value: str, max_len: int = SAMPLE_WIDTH) -> None:
        """Count one more occurrence, keeping the first non-empty value as sample."""
        self.count += 1
        if not self.sample_value and value:
            self.sample_value = truncate_value(value, max_len)


def _format_float(value: float) -> str:
    """Shortest general form: plain unless the exponent is below -4 or at least 6."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if str(value).startswith("-") else "0"
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if exponent < -4 or exponent >= 6:
        sign, digits, _ = number.as_tuple()
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(str(d) for d in digits[1:])
        exp_sign = "-" if exponent < 0 else "+"
        return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return format(number, "f")


def _plain_value(value: Any) -> str:
    """Render any decoded JSON value in a compact, untyped form."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, list):
        return "[" + " ".join(_plain_value(v) for v in value) + "]"
    if isinstance(value, dict):
        inner = " ".join(f"{k}:{_plain_value(value[k])}" for k in sorted(value))
        return f"map[{inner}]"
    return str(value)


def format_sample_value(value: Any) -> str:
    """Render a decoded JSON value as a sample string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _INT64_LIMIT:
            return str(int(value))
        return _format_float(value)
    return _plain_value(value)


def extract_json_fields(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Map dotted field paths of a JSON object to sample values.

    Arrays are written with '[]'; arrays of objects are followed into their
    first element.
    """
    result: dict[str, str] = {}
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            result.update(extract_json_fields(value, path))
        elif isinstance(value, list):
            if not value:
                result[path + "[]"] = "(empty array)"
            elif isinstance(value[0], dict):
                result.update(extract_json_fields(value[0], path + "[]"))
            else:
                result[path + "[]"] = format_sample_value(value[0])
        else:
            result[path] = format_sample_value(value)
    return result


def truncate_value(text: str, max_len: int) -> str:
    """Flatten newlines and cut text longer than max_len, appending '...'."""
    text = text.replace("\n", " ").replace("\r", "")
    if len(text) > max_len:
        return text[:max_len] + "..."
    return text


def _json_object(message: str) -> dict[str, Any] | None:
    if not message.strip().startswith("{"):
        return None
    try:
        decoded = json.loads(message, parse_int=float)
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None


def collect_field_stats(
    records: Iterable[Mapping[str, str]],
) -> tuple[dict[str, FieldStats], dict[str, FieldStats]]:
    """Tally record fields and the JSON fields found inside '@message'.

    Returns the statistics of the record fields and of the JSON fields.
    """
    fields: dict[str, FieldStats] = {}
    json_fields: dict[str, FieldStats] = {}
    for record in records:
        for name, value in record.items():
            fields.setdefault(name, FieldStats()).record(value)
            if name != "@message":
                continue
            decoded = _json_object(value)
            if decoded is None:
                continue
            for path, sample in extract_json_fields(decoded).items():
                json_fields.setdefault(path, FieldStats()).record(sample)
    return fields, json_fields


def split_system_fields(names: Iterable[str]) -> tuple[list[str], list[str]]:
    """Sort names and split them into system ('@'-prefixed) and custom fields."""
    ordered = sorted(names)
    system = [name for name in ordered if name.startswith("@")]
    custom = [name for name in ordered if not name.startswith("@")]
    return system, custom