"""Pre-commit plugin that validates the format of changelog files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, Protocol

from changelog_gate.changes import ChangelogParser, ReleaseValidator
from changelog_gate.exceptions import ParseError

logger = logging.getLogger(__name__)

FILE_PATTERN = re.compile(r"^(?:changes|changelog)(?:\.(?:md|pod))?$", re.IGNORECASE)
DESCRIPTION = "The changelog format matches CPAN::Changes::Spec."
PARSE_FAILURE_MESSAGE = "Unable to parse the change log"


class CheckStatus(str, Enum):
    SKIPPED = "SKIPPED"
    PASSED = "PASSED"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of checking one file."""

    status: CheckStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not CheckStatus.FAILED


class FileContentSource(Protocol):
    """Supplies the content of a file by repository-relative path."""

    def read(self, path: str) -> str: ...


class ValidateChangelogFormat:
    """
    Validate changelog files against CPAN::Changes::Spec.

    Args:
        file_pattern: Optional override for the file-name selection regex.
        unknown_dates: Extra markers accepted in place of a release date.
    """

    def __init__(
        self,
        file_pattern: str | re.Pattern[str] | None = None,
        unknown_dates: Iterable[str] = (),
    ) -> None:
        if file_pattern is None:
            self.file_pattern = FILE_PATTERN
        elif isinstance(file_pattern, str):
            self.file_pattern = re.compile(file_pattern, re.IGNORECASE)
        else:
            self.file_pattern = file_pattern

        unknown_dates = tuple(unknown_dates)
        self.parser = ChangelogParser(unknown_dates)
        self.validator = ReleaseValidator(unknown_dates)

    @property
    def description(self) -> str:
        return DESCRIPTION

    def matches(self, path: str) -> bool:
        """Return True when the file's base name looks like a changelog."""
        return self.file_pattern.match(PurePosixPath(path).name) is not None

    def check_text(self, text: str) -> CheckResult:
        try:
            document = self.parser.parse(text)
        except ParseError as exc:
            logger.debug("Parse failure: %s", exc)
            return CheckResult(CheckStatus.FAILED, PARSE_FAILURE_MESSAGE)

        errors = self.validator.validate(document)
        if errors:
            return CheckResult(CheckStatus.FAILED, "\n".join(error.message for error in errors))
        return CheckResult(CheckStatus.PASSED)

    def run_pre_commit_file(
        self,
        path: str,
        git_action: str,
        source: FileContentSource,
    ) -> CheckResult:
        """
        Check one staged file.

        Args:
            path: Repository-relative path of the file.
            git_action: Git status letter for the file (``A``, ``M``, ``D``, ...).
            source: Where to read the file content from.

        Returns:
            SKIPPED for deleted files, otherwise PASSED or FAILED with the
            accumulated error text.
        """
        if git_action == "D":
            return CheckResult(CheckStatus.SKIPPED)

        try:
            text = source.read(path)
        except UnicodeDecodeError:
            return CheckResult(CheckStatus.FAILED, PARSE_FAILURE_MESSAGE)

        return self.check_text(text)
