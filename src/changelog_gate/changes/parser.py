"""Changelog parser.

Turns CPAN::Changes style text into a :class:`ChangelogDocument`::

    Revision history for Foo-Bar

    1.01 2016-02-01
        [Bug Fixes]
        - Handle empty input.

    1.00 2016-01-01 Initial release
        - First version.

Markdown headings (``## 1.01 - 2016-02-01``, ``## [1.01] - 2016-02-01``) are
accepted for release headers too.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from changelog_gate.exceptions import ParseError

from .grammar import W3CDTF_PATTERN, unknown_date_prefix_re
from .types import ChangeGroup, ChangelogDocument, ReleaseRecord

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#+\s*")
_VERSION_SPLIT_RE = re.compile(r"\s[\W\s]*")
_VERSION_LIKE_RE = re.compile(r"^v?\d")
# A date must not run straight into more digits, a time or a longer date.
_DATE_PREFIX_RE = re.compile(rf"^{W3CDTF_PATTERN}(?![\w:]|[-.+]\d)")
# Only full dates with at least a month mark a header on their own.
_HEADER_DATE_RE = re.compile(rf"^(?=\d{{4}}-){W3CDTF_PATTERN}$")
_GROUP_RE = re.compile(r"^\s*\[\s*([^\]]+?)\s*\]\s*$")
_BULLET_RE = re.compile(r"^[-*+](?:\s|$)")
_ITEM_RE = re.compile(r"^\s*[-*+](?:\s+|$)(.*)$")


@dataclass
class _ReleaseBuilder:
    version: str
    date: str | None
    note: str | None
    line: int
    heading_level: int = 0
    groups: list[tuple[str, list[str]]] = field(default_factory=list)

    def open_group(self, name: str) -> None:
        self.groups.append((name, []))

    def add_item(self, text: str) -> None:
        if not self.groups:
            self.open_group("")
        self.groups[-1][1].append(text)

    def extend_item(self, text: str) -> None:
        if not self.groups or not self.groups[-1][1]:
            self.add_item(text)
            return
        items = self.groups[-1][1]
        items[-1] = f"{items[-1]} {text}".strip()

    def build(self) -> ReleaseRecord:
        return ReleaseRecord(
            version=self.version,
            date=self.date,
            note=self.note,
            changes=tuple(ChangeGroup(name=name, items=tuple(items)) for name, items in self.groups),
            line=self.line,
        )


class ChangelogParser:
    """Parse raw changelog text into release records."""

    def __init__(self, unknown_dates: Iterable[str] = ()) -> None:
        self._unknown_prefix_re = unknown_date_prefix_re(unknown_dates)

    def parse(self, text: str) -> ChangelogDocument:
        """
        Parse changelog text.

        Args:
            text: Full content of the changelog file.

        Returns:
            Document with zero or more releases in source order.

        Raises:
            ParseError: If the content cannot be a changelog (not text, or binary).
        """
        if not isinstance(text, str):
            raise ParseError(f"expected changelog text, got {type(text).__name__}")
        if "\x00" in text:
            raise ParseError("changelog contains binary data")

        text = text.replace("\r\n", "\n").replace("\r", "\n")

        preamble: list[str] = []
        releases: list[_ReleaseBuilder] = []

        for lineno, raw in enumerate(text.split("\n"), start=1):
            line = raw.rstrip()
            if not line.strip():
                if not releases:
                    preamble.append("")
                continue

            header = self._parse_header(line, lineno, releases[-1] if releases else None)
            if header is not None:
                releases.append(header)
                continue

            if not releases:
                preamble.append(line)
                continue

            self._parse_change_line(releases[-1], line)

        logger.debug("Parsed %d release(s)", len(releases))
        return ChangelogDocument(
            releases=tuple(builder.build() for builder in releases),
            preamble="\n".join(preamble).strip("\n"),
        )

    def _parse_header(
        self,
        line: str,
        lineno: int,
        current: _ReleaseBuilder | None,
    ) -> _ReleaseBuilder | None:
        """
        Recognise a release header line.

        Before the first release only lines that look like a release end the
        preamble. After that, every unindented line is a release unless it is
        a ``[Group]``, a bullet, or a heading nested below the release heading.
        Under Markdown release headings, plain unindented text is content.
        """
        if line[0].isspace():
            return None

        level = len(line) - len(line.lstrip("#"))
        content = _HEADING_RE.sub("", line, count=1)
        if not content:
            return None

        if current is not None:
            if _GROUP_RE.match(content):
                return None
            if current.heading_level:
                if not level or level > current.heading_level:
                    return None
            elif level or _BULLET_RE.match(content):
                return None

        parts = _VERSION_SPLIT_RE.split(content, maxsplit=1)
        version = parts[0].strip()
        if version.startswith("[") and version.endswith("]"):
            version = version[1:-1].strip()
        remainder = parts[1].strip() if len(parts) > 1 else ""

        date, note = self._split_date(remainder)

        if current is None:
            if not any(char.isalnum() for char in version):
                return None
            if not _VERSION_LIKE_RE.match(version):
                dated = date is not None and (
                    _HEADER_DATE_RE.match(date) or self._unknown_prefix_re.match(date)
                )
                if not dated:
                    return None

        return _ReleaseBuilder(
            version=version,
            date=date,
            note=note,
            line=lineno,
            heading_level=level,
        )

    def _split_date(self, remainder: str) -> tuple[str | None, str | None]:
        if not remainder:
            return None, None

        match = self._unknown_prefix_re.match(remainder) or _DATE_PREFIX_RE.match(remainder)
        if match:
            date = match.group(0)
            rest = remainder[match.end() :]
        else:
            date, _, rest = remainder.replace("\t", " ").partition(" ")
        return date.strip(), rest.strip() or None

    @staticmethod
    def _parse_change_line(release: _ReleaseBuilder, line: str) -> None:
        group = _GROUP_RE.match(line)
        if group:
            release.open_group(group.group(1))
            return

        if _HEADING_RE.match(line):
            release.open_group(_HEADING_RE.sub("", line, count=1).strip())
            return

        item = _ITEM_RE.match(line)
        if item:
            release.add_item(item.group(1).strip())
            return

        release.extend_item(line.strip())


def parse(text: str) -> ChangelogDocument:
    """Parse changelog text with the default unknown-date markers."""
    return ChangelogParser().parse(text)
