"""Schema Composer configuration.

Resolution order: explicit arguments > env vars (SCHEMA_COMPOSER_*) > .env file > defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CLASS_MATCHING_THRESHOLD = 0.3
DEFAULT_ROOT_CLASS_SUFFIX = "Input"
DEFAULT_UNKNOWN_CLASS_NAME = "Unknown"

OutputFormat = Literal["json", "yaml"]


class ComposerConfig(BaseSettings):
    """Settings for composition runs and their outputs."""

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_COMPOSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Matching ---
    class_matching_threshold: float = Field(
        default=DEFAULT_CLASS_MATCHING_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Feature overlap ratio a registered class must exceed to match",
    )
    root_class_suffix: str = Field(
        default=DEFAULT_ROOT_CLASS_SUFFIX,
        min_length=1,
        description="Name suffix of root wrapper classes, which never match",
    )
    unknown_class_name: str = Field(
        default=DEFAULT_UNKNOWN_CLASS_NAME,
        min_length=1,
        description="Name of the placeholder class for unresolved references",
    )

    # --- Unified schema namespace ---
    namespace_base_uri: str = "http://schema-composer.dev/discovered/"
    namespace_prefix_stem: str = "composed"

    # --- Output ---
    output_format: OutputFormat = "json"

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None


@lru_cache(maxsize=1)
def get_config() -> ComposerConfig:
    """Return the global config singleton."""
    return ComposerConfig()
