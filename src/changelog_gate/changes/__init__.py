"""Changelog parsing and validation."""

from __future__ import annotations

from .parser import ChangelogParser, parse
from .types import ChangeGroup, ChangelogDocument, ReleaseRecord, ValidationError
from .validator import NO_RELEASES_MESSAGE, ReleaseValidator

__all__ = [
    "NO_RELEASES_MESSAGE",
    "ChangeGroup",
    "ChangelogDocument",
    "ChangelogParser",
    "ReleaseRecord",
    "ReleaseValidator",
    "ValidationError",
    "parse",
]
