# src/xaiprecompute/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for every recognised option and its default:
completion model parameters, cache TTL, batch execution defaults and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xaiprecompute.core.errors import ConfigurationError

__all__ = ["ConfigurationError", "Settings", "load_settings"]


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Completion API ===
    llm_provider: str = "openai"
    openai_api_key: str = ""
    openai_base_url: str = ""
    precompute_model: str = "gpt-3.5-turbo"
    precompute_temperature: float = 0.7
    precompute_max_tokens: int = 1000

    # === Explanations ===
    enable_xai: bool = True
    explanation_method: Literal["heuristic", "surrogate"] = "heuristic"
    explanation_seed: int | None = None
    surrogate_model_id: str = "threat_assessment_v1"

    # === Cache ===
    cache_backend: Literal["json", "memory"] = "json"
    cache_root: Path = Path("~/.xaiprecompute/cache")
    cache_ttl_hours: float = 24.0

    # === Batch execution defaults ===
    batch_size: int = 5
    delay_between_batches_ms: int = 2000
    retry_failed_queries: bool = True
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_item_delay_ms: int = 500

    # === Export ===
    export_dir: Path = Path("./exports")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("batch_size must be >= 1")
        return v

    @field_validator(
        "delay_between_batches_ms",
        "max_retries",
        "retry_base_delay_ms",
        "retry_item_delay_ms",
        "precompute_max_tokens",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not 0.0 <= self.precompute_temperature <= 2.0:
            errors.append("PRECOMPUTE_TEMPERATURE must be within [0, 2]")

        if self.cache_ttl_hours <= 0:
            errors.append("CACHE_TTL_HOURS must be > 0")

        if self.explanation_method == "surrogate" and not self.surrogate_model_id:
            errors.append("EXPLANATION_METHOD=surrogate requires SURROGATE_MODEL_ID")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600.0


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
