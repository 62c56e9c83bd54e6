"""Pytest configuration helpers."""

from __future__ import annotations

from typing import Iterator

import pytest

from changelog_gate.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ambient CHANGELOG_GATE_* variables and cached settings out of tests."""
    for name in ("READ_FROM", "LOG_LEVEL", "POLICY_PATH"):
        monkeypatch.delenv(f"CHANGELOG_GATE_{name}", raising=False)
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()
