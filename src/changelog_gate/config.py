"""Configuration management for the changelog gate."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_POLICY_FILE = ".changelog-gate.yaml"


class Settings(BaseSettings):
    """Gate settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CHANGELOG_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    READ_FROM: Literal["index", "worktree"] = Field(
        default="index",
        description="Read staged content from the git index or from the working tree",
    )
    LOG_LEVEL: str = Field(default="WARNING", description="Logging level for the gate")
    POLICY_PATH: str | None = Field(
        default=None,
        description=f"Policy file (defaults to {DEFAULT_POLICY_FILE} in the repository root)",
    )


class Policy(BaseModel):
    """Per-repository overrides read from a YAML policy file."""

    file_pattern: str | None = None
    unknown_dates: list[str] = Field(default_factory=list)

    @field_validator("file_pattern")
    @classmethod
    def validate_file_pattern(cls, value: str | None) -> str | None:
        """Reject patterns that do not compile."""
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid file_pattern {value!r}: {exc}") from exc
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_policy(path: Path | None, *, explicit: bool = False) -> Policy:
    """
    Load a policy file.

    A missing file yields the default policy. Missing files that were asked
    for explicitly are logged as a warning.

    Raises:
        ValueError: If the file is not a valid policy.
    """
    if path is None or not Path(path).is_file():
        if path is not None and explicit:
            logger.warning("Policy file %s not found, using defaults", path)
        elif path is not None:
            logger.debug("Policy file %s not found, using defaults", path)
        return Policy()

    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Policy file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Policy file {path} must contain a mapping")
    return Policy.model_validate(data)
