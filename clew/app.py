"""Application settings and the per-run application object."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Mapping, TextIO

_TRUE_WORDS = frozenset({"1", "t", "true", "yes", "y", "on"})


@dataclass
class Config:
    """Values given for this run; empty ones defer to the loaded settings."""

    profile: str = ""
    region: str = ""
    output_format: str = ""
    verbose: bool = False
    no_color: bool = False
    quiet: bool = False


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    return bool(value)


@dataclass
class App:
    """Configuration and shared state of one command run."""

    config: Config = field(default_factory=Config)
    settings: Mapping[str, Any] = field(default_factory=dict)
    account_id_cache: dict[str, str] = field(default_factory=dict)
    stream: TextIO | None = None

    def _setting(self, key: str) -> str:
        return _as_text(self.settings.get(key))

    @property
    def profile(self) -> str:
        """The AWS profile given for this run, else the configured one."""
        return self.config.profile or self._setting("profile")

    @property
    def region(self) -> str:
        """The AWS region given for this run, else the configured one."""
        return self.config.region or self._setting("region")

    @property
    def output_format(self) -> str:
        """The output format given for this run, else the configured one."""
        return self.config.output_format or self._setting("output")

    @property
    def default_source(self) -> str:
        """The configured default source, or an empty string."""
        return self._setting("default_source")

    @property
    def verbose(self) -> bool:
        return self.config.verbose or _as_bool(self.settings.get("verbose"))

    def debug(self, message: str) -> None:
        """Write a debug message when verbose output is enabled."""
        if not self.verbose:
            return
        out = self.stream if self.stream is not None else sys.stderr
        out.write(f"DEBUG: {message}\n")


_current_app: ContextVar[App] = ContextVar("clew_app")


def set_app(app: App):
    """Make app the current application; returns a token for resetting it."""
    return _current_app.set(app)


def get_app() -> App:
    """The current application, or a default one when none was set."""
    try:
        return _current_app.get()
    except LookupError:
        return App()