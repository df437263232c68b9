"""Global configuration from XDG paths, the config file and env vars."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from branchpick.exceptions import ConfigError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "branchpick"
    return Path.home() / ".local" / "share" / "branchpick"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "branchpick"
    return Path.home() / ".config" / "branchpick"


@dataclass
class PickerConfig:
    """Application-wide configuration."""

    data_dir: Path = field(default_factory=_default_data_dir)
    config_dir: Path = field(default_factory=_default_config_dir)
    remote: bool = False
    git_timeout: float = 10.0
    match_limit: int | None = None
    verbose: bool = False

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.yaml"

    @property
    def log_file(self) -> Path:
        return self.data_dir / "branchpick.log"

    @classmethod
    def load(cls) -> PickerConfig:
        """Load config from the YAML file, then environment variables.

        Environment variables take precedence over the file.
        """
        config = cls()
        config._apply_file(config.config_file)

        env_remote = os.environ.get("BRANCHPICK_REMOTE")
        if env_remote is not None:
            config.remote = _parse_bool("BRANCHPICK_REMOTE", env_remote)

        env_timeout = os.environ.get("BRANCHPICK_GIT_TIMEOUT")
        if env_timeout:
            config.git_timeout = _parse_timeout("BRANCHPICK_GIT_TIMEOUT", env_timeout)

        env_limit = os.environ.get("BRANCHPICK_MATCH_LIMIT")
        if env_limit:
            config.match_limit = _parse_limit("BRANCHPICK_MATCH_LIMIT", env_limit)

        return config

    def _apply_file(self, path: Path) -> None:
        if not path.is_file():
            return

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError):
            logger.warning("Failed to load config from %s", path)
            return

        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a mapping", path)
            return

        if "remote" in data:
            value = data["remote"]
            if not isinstance(value, bool):
                raise ConfigError(f"{path}: 'remote' must be true or false")
            self.remote = value
        if "git_timeout" in data:
            self.git_timeout = _parse_timeout(f"{path}: git_timeout", data["git_timeout"])
        if "match_limit" in data:
            value = data["match_limit"]
            self.match_limit = None if value is None else _parse_limit(
                f"{path}: match_limit", value
            )

        logger.debug("Loaded config from %s", path)


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_timeout(name: str, raw: object) -> float:
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _parse_limit(name: str, raw: object) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {raw!r}")
    return value
