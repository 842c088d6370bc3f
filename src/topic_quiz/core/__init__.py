"""Shared helpers for the topic-quiz command."""

from __future__ import annotations

from .ai import API_KEY_ENV, load_client
from .config import (
    AppConfig,
    ConfigError,
    find_config_path,
    load_config,
    load_toml,
    merge_defaults,
)
from .logging import JsonLogFormatter, configure_logger

__all__ = [
    "API_KEY_ENV",
    "load_client",
    "AppConfig",
    "ConfigError",
    "find_config_path",
    "load_config",
    "load_toml",
    "merge_defaults",
    "JsonLogFormatter",
    "configure_logger",
]
