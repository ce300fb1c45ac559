"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from archscope.domain.ports.config import (
    AnalysisConfig,
    AppConfig,
    GraphConfig,
    ScoringConfig,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Config or rules file is unreadable or malformed."""


def load_toml(path: Path) -> dict:
    """Load TOML file."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot load {path}: {e}") from e


def _int_override(config: dict, section: str, key: str, env_name: str) -> None:
    raw = os.getenv(env_name)
    if not raw:
        return
    try:
        config.setdefault(section, {})[key] = int(raw)
    except ValueError:
        logger.warning("Invalid %s env value: %r, ignoring", env_name, raw)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if level := os.getenv("ARCHSCOPE_LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("ARCHSCOPE_LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if rules := os.getenv("ARCHSCOPE_RULES_FILE"):
        config.setdefault("graph", {})["rules_file"] = rules.strip()
    _int_override(config, "analysis", "max_workers", "ARCHSCOPE_MAX_WORKERS")
    _int_override(config, "analysis", "max_files", "ARCHSCOPE_MAX_FILES")
    return config


def _merge(base: dict, overlay: dict) -> dict:
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = {**base[key], **value}
        else:
            base[key] = value
    return base


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        config = _merge(config, load_toml(dev_path))

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    try:
        return AppConfig(
            analysis=AnalysisConfig(**(config.get("analysis") or {})),
            graph=GraphConfig(**(config.get("graph") or {})),
            scoring=ScoringConfig(**(config.get("scoring") or {})),
            log_level=logging_raw.get("level", "INFO"),
            log_file=(logging_raw.get("file") or "").strip(),
            log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
            log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_dir}: {e}") from e
