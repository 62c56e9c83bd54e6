"""Tests for the changelog parser."""

from __future__ import annotations

import pytest

from changelog_gate.changes import ChangelogParser, parse
from changelog_gate.exceptions import ParseError

CPAN_STYLE = """\
Revision history for App-Example

v1.1.0 2016-02-03 Bug fix release
    [Bug Fixes]
    - Handle empty input.
      Continuation of the first item.
    - Second fix.

    [Documentation]
    * Typos.

1.0-TRIAL Unknown Release Date
  - Trial release.

0.01 2016-01-01
        - Initial release.
"""


def test_parse_cpan_style_changelog() -> None:
    """Test parsing headers, groups and items."""
    document = parse(CPAN_STYLE)

    assert document.preamble == "Revision history for App-Example"
    assert [release.version for release in document.releases] == ["v1.1.0", "1.0-TRIAL", "0.01"]
    assert [release.date for release in document.releases] == [
        "2016-02-03",
        "Unknown Release Date",
        "2016-01-01",
    ]

    first = document.releases[0]
    assert first.note == "Bug fix release"
    assert first.line == 3
    assert [group.name for group in first.changes] == ["Bug Fixes", "Documentation"]
    assert first.changes[0].items == (
        "Handle empty input. Continuation of the first item.",
        "Second fix.",
    )
    assert first.changes[1].items == ("Typos.",)

    last = document.releases[2]
    assert last.note is None
    assert last.changes[0].name == ""
    assert last.changes[0].items == ("Initial release.",)


def test_parse_header_without_date() -> None:
    document = parse("0.01\n")

    assert len(document) == 1
    assert document.releases[0].version == "0.01"
    assert document.releases[0].date is None


def test_parse_release_without_changes() -> None:
    document = parse("0.01 2016-01-01")

    assert document.releases[0].changes == ()


def test_parse_non_numeric_version_with_date() -> None:
    """A dated header counts as a release even with a bad version."""
    document = parse("abc 2016-01-01\n")

    assert document.releases[0].version == "abc"
    assert document.releases[0].date == "2016-01-01"


def test_parse_plain_text_has_no_releases() -> None:
    document = parse("test\n")

    assert document.releases == ()
    assert document.preamble == "test"


def test_parse_empty_text() -> None:
    document = parse("")

    assert document.releases == ()
    assert document.preamble == ""


def test_parse_keeps_date_tokens_verbatim() -> None:
    document = parse("1.0 2016-01-01T10:00:00Z\n0.9 01/01/2016 old format\n")

    assert document.releases[0].date == "2016-01-01T10:00:00Z"
    assert document.releases[1].date == "01/01/2016"
    assert document.releases[1].note == "old format"


def test_parse_markdown_headings() -> None:
    text = """\
# Changelog

All notable changes to this project.

## [1.1.0] - 2016-02-03
### Added
- New option.

## 1.0.0 - 2016-01-01
### Fixed
- Crash on start.
"""
    document = parse(text)

    assert document.preamble.startswith("# Changelog")
    assert [release.version for release in document.releases] == ["1.1.0", "1.0.0"]
    assert [release.date for release in document.releases] == ["2016-02-03", "2016-01-01"]
    assert document.releases[0].changes[0].name == "Added"
    assert document.releases[0].changes[0].items == ("New option.",)
    assert document.releases[1].changes[0].name == "Fixed"


def test_parse_windows_line_endings() -> None:
    document = parse("Intro\r\n\r\n1.0 2016-01-01\r\n  - Item\r\n")

    assert document.releases[0].version == "1.0"
    assert document.releases[0].changes[0].items == ("Item",)


def test_parse_unknown_date_markers() -> None:
    document = parse("1.1 TBA\n1.0 not released yet\n")

    assert document.releases[0].date == "TBA"
    assert document.releases[1].date == "not released"
    assert document.releases[1].note == "yet"


def test_parse_custom_unknown_date_marker() -> None:
    parser = ChangelogParser(unknown_dates=["Next Sprint"])
    document = parser.parse("1.1 Next Sprint\n")

    assert document.releases[0].date == "Next Sprint"


def test_parse_rejects_bytes() -> None:
    with pytest.raises(ParseError):
        ChangelogParser().parse(b"0.01 2016-01-01\n")  # type: ignore[arg-type]


def test_parse_rejects_binary_content() -> None:
    with pytest.raises(ParseError):
        parse("0.01 2016-01-01\n\x00\x01")


def test_parse_is_idempotent() -> None:
    parser = ChangelogParser()

    assert parser.parse(CPAN_STYLE) == parser.parse(CPAN_STYLE)


def test_unindented_line_after_a_release_starts_a_new_release() -> None:
    """Any unindented text between releases is a header, however malformed."""
    document = parse(
        "0.02 2016-02-01\n  - fix\ntrunk\n  - wip\nnext 02/03/2016\n  - x\n0.01 2016-01-01\n"
    )

    assert [release.version for release in document.releases] == ["0.02", "trunk", "next", "0.01"]
    assert document.releases[0].changes[0].items == ("fix",)
    assert document.releases[1].date is None
    assert document.releases[1].changes[0].items == ("wip",)
    assert document.releases[2].date == "02/03/2016"


def test_unindented_groups_and_bullets_stay_with_the_release() -> None:
    document = parse("0.02 2016-02-01\n[Fixes]\n- one\n* two\n")

    assert len(document) == 1
    assert document.releases[0].changes[0].name == "Fixes"
    assert document.releases[0].changes[0].items == ("one", "two")


def test_markdown_text_under_a_release_heading_is_content() -> None:
    text = (
        "## 1.1.0 - 2016-02-03\n"
        "Some prose about the release.\n"
        "### Added\n"
        "- New option.\n"
        "## 1.0.0 - 2016-01-01\n"
    )
    document = parse(text)

    assert [release.version for release in document.releases] == ["1.1.0", "1.0.0"]
    assert document.releases[0].changes[0].items == ("Some prose about the release.",)
    assert document.releases[0].changes[1].name == "Added"


@pytest.mark.parametrize(
    ("line", "note"),
    [
        ("1.0 2016-01-01, bugfix release", ", bugfix release"),
        ("1.0 (2016-01-01)", ")"),
        ("1.0 2016-01-01; TRIAL", "; TRIAL"),
    ],
)
def test_date_followed_by_punctuation(line: str, note: str) -> None:
    release = parse(line).releases[0]

    assert release.date == "2016-01-01"
    assert release.note == note


@pytest.mark.parametrize("line", ["1.0 2016-2020", "1.0 2016-01-01T10", "1.0 20160101"])
def test_date_prefix_does_not_cut_longer_tokens(line: str) -> None:
    release = parse(line).releases[0]

    assert release.date == line.split(" ", 1)[1]
