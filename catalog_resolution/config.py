"""Configuration management using pydantic-settings."""
import logging
import sys
from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog


class LogFormat(str, Enum):
    """Supported log renderers."""
    JSON = "json"
    CONSOLE = "console"


class MatchingSettings(BaseSettings):
    """Matching pipeline configuration loaded from environment variables.

    All settings prefixed with MATCH_ (e.g., MATCH_AUTO_MERGE_THRESHOLD=0.85)

    The defaults are empirically tuned against real false-positive and
    false-negative costs and are preserved exactly.
    """

    # Decision thresholds
    auto_merge_threshold: float = Field(
        default=0.85,
        ge=0,
        le=1,
        description="Score >= this merges the listing into the catalog entry"
    )
    review_threshold: float = Field(
        default=0.65,
        ge=0,
        le=1,
        description="Score >= this (and below auto-merge) queues a human review"
    )
    fallback_auto_merge_threshold: float = Field(
        default=0.92,
        ge=0,
        le=1,
        description="Auto-merge threshold when only the category-wide index was searched"
    )
    fallback_review_threshold: float = Field(
        default=0.75,
        ge=0,
        le=1,
        description="Review threshold when only the category-wide index was searched"
    )

    # Penalty factors
    brand_mismatch_penalty: float = Field(
        default=0.35,
        ge=0,
        le=1,
        description="Multiplier applied when both brands are known and different"
    )
    weak_overlap_floor: float = Field(
        default=0.6,
        ge=0,
        le=1,
        description="Bigram sub-scores at or above this are checked for weak token overlap"
    )
    generic_overlap_penalty: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Multiplier when the only shared tokens are generic audio words"
    )
    no_token_overlap_penalty: float = Field(
        default=0.6,
        ge=0,
        le=1,
        description="Multiplier when names share bigrams but no whole tokens"
    )
    short_token_overlap_penalty: float = Field(
        default=0.65,
        ge=0,
        le=1,
        description="Multiplier when the only shared tokens are very short"
    )
    short_token_max_length: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Tokens of at most this length count as short"
    )

    # Review queue
    max_candidates: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum candidates reported alongside a decision"
    )

    # Externally supplied brand tables
    brand_table_path: Optional[Path] = Field(
        default=None,
        description="JSON file with brand aliases and sub-brand parents"
    )

    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_threshold_order(self) -> "MatchingSettings":
        """Ensure review thresholds sit strictly below their auto-merge thresholds."""
        if self.review_threshold >= self.auto_merge_threshold:
            raise ValueError("review_threshold must be below auto_merge_threshold")
        if self.fallback_review_threshold >= self.fallback_auto_merge_threshold:
            raise ValueError(
                "fallback_review_threshold must be below fallback_auto_merge_threshold"
            )
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.JSON
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instances
settings = Settings()
matching_settings = MatchingSettings()


def configure_logging(
    log_level: str = "INFO",
    log_format: LogFormat = LogFormat.JSON,
) -> None:
    """Configure structlog for JSON (or console) logging."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == LogFormat.CONSOLE
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Initialize logging on module import (after settings are loaded)
configure_logging(settings.log_level, settings.log_format)
