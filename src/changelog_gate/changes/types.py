"""Typed structures representing a parsed changelog."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ChangeGroup:
    """Change items listed under a release, optionally inside a ``[Group]``."""

    name: str = ""
    items: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """One release entry as it appears in the changelog.

    ``version`` and ``date`` hold the header tokens verbatim (trimmed only).
    ``date`` is ``None`` when the header carries no date at all.
    """

    version: str
    date: str | None = None
    note: str | None = None
    changes: tuple[ChangeGroup, ...] = ()
    line: int = 0


@dataclass(frozen=True, slots=True)
class ChangelogDocument:
    """Whole parsed changelog; releases keep their source order."""

    releases: tuple[ReleaseRecord, ...] = ()
    preamble: str = ""

    def __len__(self) -> int:
        return len(self.releases)


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Problems found for one release, or for the document as a whole.

    ``release_index`` is 1-based. It is ``None`` for document-level errors,
    whose reasons are rendered without the ``Release N/Total`` prefix.
    """

    release_index: int | None
    release_count: int
    reasons: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_document_level(self) -> bool:
        return self.release_index is None

    @property
    def prefix(self) -> str:
        if self.release_index is None:
            return ""
        return f"Release {self.release_index}/{self.release_count}"

    @property
    def message(self) -> str:
        """Render every reason on its own line."""
        if self.release_index is None:
            return "\n".join(self.reasons)
        return "\n".join(f"{self.prefix}: {reason}" for reason in self.reasons)

    def __str__(self) -> str:
        return self.message
