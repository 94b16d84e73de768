"""
bootstrap/config.py - Library configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type, TypeVar
from enum import Enum
from pathlib import Path
import os
import json
import logging

from ample.core.enums import PresentationBehavior, RetryBehavior
from ample.errors.exceptions import ConfigurationError

logger = logging.getLogger("bootstrap.config")

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: Type[E], value: Any, source: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"Invalid {enum_cls.__name__} '{value}' from {source} (expected one of: {allowed})"
        ) from None


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def _env_flag(name: str, default: str) -> bool:
    return _parse_flag(os.getenv(name, default))


# Fields read from a config file that must be coerced to bool
_FLAG_FIELDS = {"enabled", "json_logs"}


@dataclass
class TreeConfig:
    """Defaults applied to nodes created without explicit behaviors."""

    default_presentation_behavior: PresentationBehavior = PresentationBehavior.ACCEPTS_SUPPRESSION
    default_retry_behavior: RetryBehavior = RetryBehavior.ANCESTOR

    @classmethod
    def from_env(cls) -> "TreeConfig":
        return cls(
            default_presentation_behavior=_parse_enum(
                PresentationBehavior,
                os.getenv("AMPLE_DEFAULT_PRESENTATION", "accepts_suppression"),
                "AMPLE_DEFAULT_PRESENTATION",
            ),
            default_retry_behavior=_parse_enum(
                RetryBehavior,
                os.getenv("AMPLE_DEFAULT_RETRY", "ancestor"),
                "AMPLE_DEFAULT_RETRY",
            ),
        )


@dataclass
class NotificationConfig:
    """Change-notification configuration."""

    enabled: bool = True  # False -> signals start paused and drop emissions

    @classmethod
    def from_env(cls) -> "NotificationConfig":
        return cls(
            enabled=_env_flag("AMPLE_NOTIFICATIONS", "true"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("AMPLE_LOG_LEVEL", "INFO"),
            format=os.getenv("AMPLE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("AMPLE_LOG_FILE"),
            json_logs=_env_flag("AMPLE_JSON_LOGS", "false"),
        )


@dataclass
class AmpleConfig:
    """Root configuration."""

    tree: TreeConfig = field(default_factory=TreeConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AmpleConfig":
        """Create configuration from environment variables."""
        return cls(
            tree=TreeConfig.from_env(),
            notification=NotificationConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "AmpleConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {filepath}: {e}") from e

        return cls._from_dict(data, source=str(path))

    @classmethod
    def _from_dict(cls, data: Dict[str, Any], source: str = "dict") -> "AmpleConfig":
        """Create config from dictionary; file values override the environment."""
        config = cls.from_env()

        tree = data.get("tree", {})
        if "default_presentation_behavior" in tree:
            config.tree.default_presentation_behavior = _parse_enum(
                PresentationBehavior, tree["default_presentation_behavior"], source
            )
        if "default_retry_behavior" in tree:
            config.tree.default_retry_behavior = _parse_enum(
                RetryBehavior, tree["default_retry_behavior"], source
            )

        if "notification" in data:
            for key, value in data["notification"].items():
                if hasattr(config.notification, key):
                    if key in _FLAG_FIELDS:
                        value = _parse_flag(value)
                    setattr(config.notification, key, value)

        if "logging" in data:
            for key, value in data["logging"].items():
                if hasattr(config.logging, key):
                    if key in _FLAG_FIELDS:
                        value = _parse_flag(value)
                    setattr(config.logging, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "tree": {
                "default_presentation_behavior": self.tree.default_presentation_behavior.value,
                "default_retry_behavior": self.tree.default_retry_behavior.value,
            },
            "notification": {
                "enabled": self.notification.enabled,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[AmpleConfig] = None


def load_config(filepath: str = None) -> AmpleConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        AmpleConfig instance
    """
    global _config

    if filepath:
        _config = AmpleConfig.from_file(filepath)
    else:
        default_paths = [
            "./ample.json",
            "./config/ample.json",
            os.path.expanduser("~/.ample/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = AmpleConfig.from_file(path)
                return _config

        _config = AmpleConfig.from_env()

    logger.debug(
        f"Configuration loaded: presentation={_config.tree.default_presentation_behavior.value}, "
        f"retry={_config.tree.default_retry_behavior.value}"
    )
    return _config


def get_config() -> AmpleConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: AmpleConfig) -> None:
    """Install an explicit configuration (hosts and tests)."""
    global _config
    _config = config


def reset_config() -> None:
    """Drop the cached configuration; the next get_config() reloads it."""
    global _config
    _config = None
