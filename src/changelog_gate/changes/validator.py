"""Release validation rules.

Each rule returns the reason it failed, or ``None`` when the release passes.
Rules never raise, so a failing date check cannot hide a version problem in
the same release, and one bad release cannot hide problems in the others.
"""

from __future__ import annotations

import re
from typing import Iterable

from changelog_gate.exceptions import NoReleasesError

from .grammar import UNKNOWN_DATE_RE, is_lax_version, is_w3cdtf, strip_trial, unknown_date_re
from .types import ChangelogDocument, ReleaseRecord, ValidationError

NO_RELEASES_MESSAGE = "The change log does not contain any releases"


def check_date(date: str | None, unknown_pattern: re.Pattern[str] | None = None) -> str | None:
    if date is None or date == "":
        return "the release date is missing."

    pattern = unknown_pattern or UNKNOWN_DATE_RE
    if not is_w3cdtf(date) and pattern.match(date) is None:
        return f"date '{date}' is not in the recommended format."
    return None


def check_version(version: str | None) -> str | None:
    version = strip_trial(version or "")

    if version == "":
        return "the version number is missing."
    if not is_lax_version(version):
        return f"version '{version}' is not a valid version number."
    return None


class ReleaseValidator:
    """Collect every format violation in a parsed changelog."""

    def __init__(self, unknown_dates: Iterable[str] = ()) -> None:
        self._unknown_re = unknown_date_re(unknown_dates)

    def require_releases(self, document: ChangelogDocument) -> None:
        """Raise :class:`NoReleasesError` when the document has no release."""
        if not document.releases:
            raise NoReleasesError(NO_RELEASES_MESSAGE)

    def check_release(self, release: ReleaseRecord) -> tuple[str, ...]:
        results = (
            check_date(release.date, self._unknown_re),
            check_version(release.version),
        )
        return tuple(reason for reason in results if reason is not None)

    def validate(self, document: ChangelogDocument) -> list[ValidationError]:
        """
        Validate every release of the document.

        Returns:
            One error per failing release, in release order. A document
            without releases yields a single document-level error.
        """
        total = len(document.releases)
        if total == 0:
            return [ValidationError(release_index=None, release_count=0, reasons=(NO_RELEASES_MESSAGE,))]

        errors: list[ValidationError] = []
        for index, release in enumerate(document.releases, start=1):
            reasons = self.check_release(release)
            if reasons:
                errors.append(
                    ValidationError(release_index=index, release_count=total, reasons=reasons)
                )
        return errors
