"""Log investigation building blocks: cases, reports, archives, history and time parsing."""

__version__ = "0.1.0"

__all__ = ["__version__"]