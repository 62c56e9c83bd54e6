"""Date and version grammars accepted in release headers.

Dates follow the W3C date-time profile of ISO 8601 (date-only is fine).
Releases that have not shipped yet may use one of the unknown-date markers
instead. Versions follow Perl's lax version grammar, minus the ``undef``
literal.
"""

from __future__ import annotations

import re
from typing import Iterable

W3CDTF_PATTERN = (
    r"\d{4}"
    r"(?:-\d{2}"
    r"(?:-\d{2}"
    r"(?:T\d{2}:\d{2}"
    r"(?::\d{2}(?:\.\d+)?)?"
    r"(?:Z|[-+]\d{2}:\d{2})?"
    r")?)?)?"
)

UNKNOWN_DATES: tuple[str, ...] = (
    # Longest first so prefix matching picks the full marker.
    "Unknown Release Date",
    "Development Release",
    "Developer Release",
    "Not Released",
    "Development",
    "Unknown",
    "TBA",
    "TBD",
)

_INTEGER = r"[0-9]+"
_FRACTION = r"\.[0-9]+"
_DOTTED_PART = r"\.[0-9]+"
_ALPHA = r"_[0-9]+"

_LAX_DECIMAL = (
    rf"{_INTEGER}(?:\.|{_FRACTION}(?:{_ALPHA})?)?"
    rf"|{_FRACTION}(?:{_ALPHA})?"
)
_LAX_DOTTED = (
    rf"v{_INTEGER}(?:(?:{_DOTTED_PART})+(?:{_ALPHA})?)?"
    rf"|(?:{_INTEGER})?(?:{_DOTTED_PART}){{2,}}(?:{_ALPHA})?"
)

W3CDTF_RE = re.compile(rf"^{W3CDTF_PATTERN}$")
W3CDTF_PREFIX_RE = re.compile(rf"^{W3CDTF_PATTERN}(?=\s|$)")
LAX_VERSION_RE = re.compile(rf"^(?:{_LAX_DOTTED}|{_LAX_DECIMAL})$")

TRIAL_SUFFIX = "-TRIAL"


def _unknown_alternation(extra: Iterable[str] = ()) -> str:
    markers = sorted({*UNKNOWN_DATES, *extra}, key=len, reverse=True)
    return "|".join(re.escape(marker) for marker in markers)


def unknown_date_re(extra: Iterable[str] = ()) -> re.Pattern[str]:
    """Return a full-match pattern for the unknown-date markers."""
    return re.compile(rf"^(?:{_unknown_alternation(extra)})$", re.IGNORECASE)


def unknown_date_prefix_re(extra: Iterable[str] = ()) -> re.Pattern[str]:
    """Return a pattern matching an unknown-date marker at the start of a string."""
    return re.compile(rf"^(?:{_unknown_alternation(extra)})(?=\s|$)", re.IGNORECASE)


UNKNOWN_DATE_RE = unknown_date_re()


def is_w3cdtf(value: str) -> bool:
    return W3CDTF_RE.match(value) is not None


def is_unknown_date(value: str, pattern: re.Pattern[str] = UNKNOWN_DATE_RE) -> bool:
    return pattern.match(value) is not None


def is_lax_version(value: str) -> bool:
    """
    Check a version string against the lax grammar.

    Accepts decimal versions (``1``, ``0.01``, ``1.``, ``.5``, ``1.02_03``)
    and dotted-decimal versions (``v1``, ``v1.2``, ``1.2.3``, ``1.2.3_4``).

    Example:
        >>> is_lax_version("v1.2")
        True
        >>> is_lax_version("abc")
        False
    """
    return LAX_VERSION_RE.match(value) is not None


def strip_trial(version: str) -> str:
    """Remove one trailing ``-TRIAL`` marker."""
    if version.endswith(TRIAL_SUFFIX):
        return version[: -len(TRIAL_SUFFIX)]
    return version
