"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- LoaderConfig: Remote page fetching settings
- SelectionConfig: Bulk selection limits
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


@dataclass
class LoaderConfig:
    """Configuration for fetching pages of the remote collection.

    Attributes:
        base_url: Collection endpoint; pages are requested as ?page=N&limit=M
        page_size: Number of items requested per page
        fields: Optional list of item fields to request (sent as ?fields=a,b)
        id_field: Name of the identifier field on each item
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        backoff_seconds: Base delay between retries (multiplied by attempt number)
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    base_url: str = "https://api.artic.edu/api/v1/artworks"
    page_size: int = 12
    fields: list[str] = field(
        default_factory=lambda: [
            "id",
            "title",
            "place_of_origin",
            "artist_display",
            "inscriptions",
            "date_start",
            "date_end",
        ]
    )
    id_field: str = "id"
    timeout_seconds: float = 20.0
    retries: int = 2
    backoff_seconds: float = 0.5
    trust_env: bool = True
    user_agent: str = "pageselect/0.1"


@dataclass
class SelectionConfig:
    """Configuration for bulk selection.

    Attributes:
        max_pages: Upper bound on pages visited by a single select-first-N run
    """

    max_pages: int = 100


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory the log file is written to
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "pageselect.jsonl"
    directory: str = "logs"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    loader: LoaderConfig = field(default_factory=LoaderConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "loader": {
            "base_url": cfg.loader.base_url,
            "page_size": cfg.loader.page_size,
            "fields": list(cfg.loader.fields),
            "id_field": cfg.loader.id_field,
            "timeout_seconds": cfg.loader.timeout_seconds,
            "retries": cfg.loader.retries,
            "backoff_seconds": cfg.loader.backoff_seconds,
            "trust_env": cfg.loader.trust_env,
            "user_agent": cfg.loader.user_agent,
        },
        "selection": {
            "max_pages": cfg.selection.max_pages,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "directory": cfg.logging.directory,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        loader=LoaderConfig(**data["loader"]),
        selection=SelectionConfig(**data["selection"]),
        logging=LoggingConfig(**data["logging"]),
    )
