"""Content types, editor interfaces and entries: API mapping, change detection and lifecycle."""

__version__ = "0.1.0"