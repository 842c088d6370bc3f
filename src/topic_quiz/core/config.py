"""TOML configuration for the topic-quiz command."""

from __future__ import annotations

import copy
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "CONFIG_FILENAME",
    "HOME_ENV",
    "ConfigError",
    "AppConfig",
    "default_home",
    "find_config_path",
    "load_config",
    "load_toml",
    "merge_defaults",
]

CONFIG_FILENAME = "topic-quiz.toml"
HOME_ENV = "TOPIC_QUIZ_HOME"

_DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "dir": "",
    },
    "session": {
        "show_explanations": True,
    },
}


class ConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


@dataclass(frozen=True)
class AppConfig:
    """Resolved runtime settings."""

    log_level: str
    log_dir: Path
    show_explanations: bool
    source: Path | None = None


def default_home(env: Mapping[str, str] | None = None) -> Path:
    source = os.environ if env is None else env
    override = source.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".topic-quiz"


def load_toml(path: Path) -> Mapping[str, Any]:
    """Load a TOML document from ``path``.

    Errors are surfaced as :class:`ConfigError` instances so the CLI can
    report them without a traceback.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base`` enforcing known keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            merge_defaults(base_value, value, path=f"{dotted}.")
            continue
        if type(value) is not type(base_value):
            raise ConfigError(
                "Expected {0} for '{1}', found {2}.".format(
                    type(base_value).__name__,
                    dotted,
                    type(value).__name__,
                )
            )
        base[key] = value


def find_config_path(
    explicit: str | None,
    *,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path | None:
    """Locate the config file: CLI flag, then workspace home, then cwd."""

    if explicit:
        path = Path(explicit).expanduser().resolve()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    home_candidate = default_home(env) / "config.toml"
    if home_candidate.exists():
        return home_candidate.resolve()
    cwd_candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    if cwd_candidate.exists():
        return cwd_candidate.resolve()
    return None


def load_config(
    path: Path | None,
    *,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Build an :class:`AppConfig` from defaults plus an optional TOML file."""

    data = copy.deepcopy(_DEFAULTS)
    if path is not None:
        merge_defaults(data, load_toml(path))
    log_dir_raw = str(data["logging"]["dir"]).strip()
    log_dir = (
        Path(log_dir_raw).expanduser()
        if log_dir_raw
        else default_home(env) / "logs"
    )
    return AppConfig(
        log_level=str(data["logging"]["level"]).upper(),
        log_dir=log_dir,
        show_explanations=bool(data["session"]["show_explanations"]),
        source=path,
    )
