"""Engine configuration using Pydantic Settings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from person_dedupe.errors import ConfigurationError


class ResolutionConfig(BaseSettings):
    """Business thresholds for one resolution run.

    Values come from keyword arguments or from ``PERSON_DEDUPE_*`` environment
    variables. Invalid values raise ConfigurationError on construction.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSON_DEDUPE_",
        case_sensitive=False,
        extra="forbid",
        frozen=True,
    )

    # Normalization
    name_prefix_length: int = Field(default=3, ge=1)
    exclude_email_aliases: bool = Field(default=True)
    test_email_patterns: tuple[str, ...] = Field(default=("@example.", "@test."))

    # Corporate contact points
    corporate_phone_threshold: int = Field(default=5, ge=2)
    flag_corporate_emails: bool = Field(default=False)
    corporate_email_threshold: int = Field(default=5, ge=2)

    # Blocking
    refine_domain_blocks: bool = Field(default=False)
    large_block_warning: int = Field(default=1000, ge=2)

    def __init__(self, **values: Any) -> None:
        try:
            super().__init__(**values)
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from exc

    @field_validator("test_email_patterns")
    @classmethod
    def _lowercase_patterns(cls, patterns: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(pattern.strip().lower() for pattern in patterns)
        if any(not pattern for pattern in cleaned):
            raise ValueError("test email patterns must not be blank")
        return cleaned

    @model_validator(mode="after")
    def _check_thresholds(self) -> "ResolutionConfig":
        if self.large_block_warning < self.corporate_phone_threshold:
            raise ValueError("large_block_warning must not be below corporate_phone_threshold")
        return self

    @classmethod
    def coerce(cls, config: "ResolutionConfig | Mapping[str, Any] | None") -> "ResolutionConfig":
        if config is None:
            return cls()
        if isinstance(config, ResolutionConfig):
            return config
        return cls(**dict(config))


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        problems.append(f"{location}: {error['msg']}")
    return "invalid resolution config: " + "; ".join(problems)
