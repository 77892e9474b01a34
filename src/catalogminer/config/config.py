"""
Configuration management for CatalogMiner using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_MARKER = '"kind": "books#volume"'

# --- Nested Configuration Models ---


class ExtractionConfig(BaseModel):
    """Configuration for turning a raw catalog response into records."""

    marker: str = Field(default=DEFAULT_MARKER, description="Substring that occurs exactly once per record.")
    container_key: str = Field(default="items", description="Key of the array that holds the records.")
    max_records: int = Field(default=12, ge=1, description="Maximum number of records returned.")
    latin_threshold: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Minimum fraction of basic Latin letters for a title or author to be accepted.",
    )
    workers: int = Field(default=1, ge=1, description="Threads used for per-record processing.")
    fallback: Optional[Callable[[], Sequence[Any]]] = Field(
        default=None,
        exclude=True,
        description="Supplier of fallback records. None uses the built-in catalog.",
    )

    @field_validator("marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Ensure the marker is not blank."""
        if not v or not v.strip():
            raise ValueError("marker must be a non-empty string")
        return v

    @field_validator("container_key")
    @classmethod
    def validate_container_key(cls, v: str) -> str:
        if not v:
            raise ValueError("container_key must be a non-empty string")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to the console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class CatalogSettings(BaseModel):
    """Query presets used by the catalog service."""

    max_results: int = Field(default=12, ge=1, description="Records requested per listing.")
    popular_queries: List[str] = Field(
        default_factory=lambda: [
            "bestseller fiction english",
            "popular novels 2024 english",
            "award winning books english language",
        ]
    )
    popular_per_query: int = Field(default=4, ge=1)
    trending_query: str = "subject:fiction+newer:2023+language:en"
    classics_query: str = (
        'subject:classics+language:en+author:"Charles Dickens"+OR+author:"Jane Austen"+OR+author:"Mark Twain"'
    )
    landing_query: str = "bestseller fiction 2024 popular"
    landing_fallback_query: str = "popular books english"

    @field_validator("popular_queries")
    @classmethod
    def validate_popular_queries(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("popular_queries must contain at least one query")
        return v


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "CatalogMiner"
    version: str = "0.1.0"
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    model_config = SettingsConfigDict(env_prefix="CATALOGMINER_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            try:
                yaml_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "catalogminer.yaml",
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path is None:
        log.info("No config file found. Using default settings.")
        return Config()
    log.info("Loading configuration from: %s", config_path)
    return Config.from_yaml(config_path)
