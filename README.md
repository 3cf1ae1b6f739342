# clew

A clew is a ball of thread: the one Ariadne gave Theseus to find his way
out of the labyrinth. This package holds the building blocks for
following the thread through your logs: investigation *cases* with a
timeline of queries, notes and evidence, their reports and archives, a
query history, and parsing of the times and durations people type.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `clew.models`

`Case`, `TimelineEntry`, `EvidenceItem` and the `CaseStatus` enum
(`ACTIVE`, `CLOSED`). Each has `to_dict()` and `from_dict()` for storing
and loading. `display_source()` (and `EvidenceItem.display_stream()`)
fall back to the older log group and log stream fields.

### `clew.timeparse`

```python
from clew.timeparse import parse_duration, parse_timestamp, around_window

parse_duration("7d")                       # seven days
parse_duration("15m")                      # fifteen minutes
parse_timestamp("2025-12-04T10:30:00Z")    # RFC 3339 and zone-less date-times (read as UTC)
```

`parse_go_duration` reads durations such as `1h30m` or `-10ms`;
`around_window(center, "5m")` gives the range five minutes either side of
a time; `parse_metrics_time_range` resolves a start (duration or RFC 3339)
and an optional end; `parse_dimensions` turns `Name=Value` strings into a
mapping. Bad input raises `ValueError`.

### `clew.report`

```python
from clew.report import escape_typst, wrap_long_lines

escape_typst("issue #123")                 # 'issue \\#123'
wrap_long_lines("a" * 100, 50)             # no line longer than 50 characters
```

`generate_markdown_report`, `generate_json_report` and
`generate_typst_report` render a `Case`; by default the timeline keeps
only marked queries, notes and evidence, and `full=True` keeps it all
(`filter_timeline`). `resolve_report_format` picks `json`, `md` or `pdf`
from a file name. `generate_pdf_report` compiles the Typst source with
the `typst` program and raises `ReportError` when it is missing or the
compilation fails.

### `clew.export`

`export_case(case, output)` writes a zip archive holding `case.yaml`,
one JSON file per piece of evidence under `evidence/`, `report.md` and,
when `typst` is available, `report.pdf`. It returns the archive path
(`<case-id>.zip` by default, always ending in `.zip`).

### `clew.caseview` and `clew.casetimeline`

Text views of cases: `format_case_list`, `format_case_status`,
`filter_cases`, `count_entries`, `format_time_span`, `format_timeline`
and `format_evidence`. `read_text_input` gathers note text from a file,
an editor (`open_editor`, using `$EDITOR`, `$VISUAL` or `vi`), arguments
or piped stdin; `confirm_delete` accepts `y` or `yes`.

### `clew.fields`

```python
from clew.fields import extract_json_fields, truncate_value

extract_json_fields({"user": {"name": "John"}}, "")   # {'user.name': 'John'}
truncate_value("hello world", 8)                      # 'hello wo...'
```

`collect_field_stats` tallies the fields of sampled records and the JSON
fields inside their `@message`; `split_system_fields` separates
`@`-prefixed fields from custom ones.

### `clew.history`

`HistoryStore` keeps queries in a JSON file (by default
`~/.clew_history.json`, see `history_file_path`), newest first, at most
50 unless told otherwise, with `load`, `add`, `get` and `clear`.
`HistoryEntry.rerun_source()` gives the source to query again;
`format_history_line`, `format_log_groups` and `truncate_string` shape the
listing.

### `clew.app` and `clew.initcfg`

`App` combines a run's `Config` with loaded settings (`profile`,
`region`, `output_format`, `default_source`, `debug`); `set_app` and
`get_app` hold the current one. `generate_default_config` produces the
commented starter configuration, and `create_file_if_not_exists` writes
it without overwriting an existing file unless forced.

## What it does not do

There is no command-line program, and nothing reads configuration files
or environment variables into settings: `App` takes its settings as a
mapping you supply. The package does not query any log source or
metrics service itself, and it does not store cases on disk for you:
cases are data objects you load and save with `to_dict` and `from_dict`.