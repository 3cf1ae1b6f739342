"""Creation of the default configuration and history files."""

from __future__ import annotations

import ntpath
import os
import sys
from pathlib import Path


def generate_default_config(home: str, platform: str | None = None) -> str:
    """The commented default configuration file for the given platform."""
    platform = platform if platform is not None else sys.platform
    example_log_group = "/my/app/logs"
    if platform.startswith("win"):
        history_file = ntpath.join(home, ".clew_history.json")
    else:
        history_file = "~/.clew_history.json"
    return f"""# clew configuration

# AWS settings
# profile: my-aws-profile
# region: us-east-1

# Default output format: text, json, csv
output: text

# Default log group when -g is omitted
# log_group: {example_log_group}

# History settings
history_max: 50
# history_file: {history_file}

# Aliases for frequently used log groups
# aliases:
#   app: /my/app/logs
#   waf: aws-waf-logs-MyALB

# Saved queries
# queries:
#   errors:
#     log_group: app
#     filter: "exception|error"
#     start: 2h
"""


def create_file_if_not_exists(
    path: str | os.PathLike, content: str, force: bool = False
) -> bool:
    """Write content to path unless it exists and force is off; True if written."""
    target = Path(path)
    if not force and target.exists():
        return False
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create directory {target.parent}: {exc}") from exc
    try:
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        raise OSError(f"failed to write {target}: {exc}") from exc
    return True