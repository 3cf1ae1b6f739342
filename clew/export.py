"""Export of a case to a portable zip archive."""

from __future__ import annotations

import json
import shutil
import subprocess
import tempfile
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from .models import Case, EvidenceItem
from .report import _json_time, generate_markdown_report, generate_typst_report


def output_filename(case_id: str, output: str = "") -> str:
    """The archive name: the given one or '<case-id>.zip', always ending in .zip."""
    name = output or f"{case_id}.zip"
    if not name.endswith(".zip"):
        name += ".zip"
    return name


def evidence_filename(index: int, ptr: str) -> str:
    """Archive path for the evidence numbered `index` (from 1)."""
    return f"evidence/{index:03d}-{ptr[:20]}.json"


def evidence_document(item: EvidenceItem) -> dict[str, Any]:
    """All fields of an evidence item, as written into the archive."""
    return {
        "ptr": item.ptr,
        "message": item.message,
        "timestamp": _json_time(item.timestamp),
        "source_uri": item.source_uri,
        "source_type": item.source_type,
        "stream": item.stream,
        "log_group": item.log_group,
        "log_stream": item.log_stream,
        "collected_at": _json_time(item.collected_at),
        "annotation": item.annotation,
        "raw_fields": dict(item.raw_fields),
    }


def _compile_pdf(case: Case, now: datetime | None) -> bytes | None:
    """Build the PDF report with typst if it is installed; None when it cannot."""
    if shutil.which("typst") is None:
        return None
    try:
        with tempfile.TemporaryDirectory(prefix="clew-export-") as tmp:
            source = Path(tmp) / "report.typ"
            target = Path(tmp) / "report.pdf"
            source.write_text(generate_typst_report(case, True, now), encoding="utf-8")
            result = subprocess.run(
                ["typst", "compile", str(source), str(target)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
            if result.returncode != 0:
                return None
            return target.read_bytes()
    except OSError:
        return None


def export_case(case: Case, output: str = "", now: datetime | None = None) -> str:
    """Write the case, its evidence and its reports into a zip; return the archive path."""
    path = output_filename(case.id, output)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(
            "case.yaml",
            yaml.safe_dump(case.to_dict(), sort_keys=False, allow_unicode=True),
        )
        for number, item in enumerate(case.evidence, start=1):
            document = json.dumps(
                evidence_document(item), indent=2, sort_keys=True, ensure_ascii=False
            )
            archive.writestr(evidence_filename(number, item.ptr), document)
        archive.writestr("report.md", generate_markdown_report(case, True, now))
        pdf = _compile_pdf(case, now)
        if pdf is not None:
            archive.writestr("report.pdf", pdf)
    return path