"""
Configuration management for the post limit host application.

Settings come from three layers, later ones winning: built-in defaults, the
JSON config file, then environment variables.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Web server and administration settings."""
    host: str
    port: int
    debug: bool
    admin_user_ids: list[str]


@dataclass
class PostLimitConfig:
    """Which content type the per-user limit applies to."""
    content_type: str


@dataclass
class ContentConfig:
    """Content types registered with the host at startup."""
    types: list[str]


@dataclass
class PathsConfig:
    """Storage locations, relative to the application directory unless absolute."""
    user_data_dir: str
    content_dir: str


@dataclass
class LoggingConfig:
    """Log output settings."""
    log_file: Optional[str]
    quiet_loggers: list[str]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# (variable, section, key, parser)
ENV_OVERRIDES: Tuple[Tuple[str, str, str, Callable[[str], Any]], ...] = (
    ("APP_HOST", "app", "host", str.strip),
    ("APP_PORT", "app", "port", int),
    ("APP_DEBUG", "app", "debug", _parse_bool),
    ("ADMIN_USER_IDS", "app", "admin_user_ids", _parse_list),
    ("POST_LIMIT_CONTENT_TYPE", "post_limit", "content_type", str.strip),
    ("CONTENT_TYPES", "content", "types", _parse_list),
    ("USER_DATA_DIR", "paths", "user_data_dir", str),
    ("CONTENT_DIR", "paths", "content_dir", str),
    ("LOG_FILE", "logging", "log_file", str),
)


class ConfigManager:
    """Loads configuration once and hands out typed sections."""

    def __init__(self, config_file: str = "web_app_config.json"):
        self.config_file = Path(config_file)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                file_config = json.loads(self.config_file.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                logger.warning(f"Ignoring unreadable config file {self.config_file}: {e}")
            else:
                if isinstance(file_config, dict):
                    self._merge_config(file_config)
                else:
                    logger.warning(f"Ignoring config file {self.config_file}: top level is not an object")

        self._override_with_env()
        self._validate()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 22581,
                "debug": False,
                "admin_user_ids": []
            },
            "post_limit": {
                "content_type": "post"
            },
            "content": {
                "types": ["post", "page"]
            },
            "paths": {
                "user_data_dir": "user_data",
                "content_dir": "content"
            },
            "logging": {
                "log_file": None,
                "quiet_loggers": ["werkzeug", "urllib3", "asyncio", "MARKDOWN"]
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file sections key by key into the defaults."""
        for section, values in file_config.items():
            if isinstance(values, dict) and isinstance(self._config.get(section), dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        for variable, section, key, parse in ENV_OVERRIDES:
            raw = os.getenv(variable)
            if not raw:
                continue
            try:
                self._config[section][key] = parse(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {variable}: {raw!r}") from None

    def _validate(self) -> None:
        """Reject settings the application cannot start with."""
        port = self._config["app"]["port"]
        if not isinstance(port, int) or not 0 < port < 65536:
            raise ValueError(f"app.port must be an integer between 1 and 65535, got {port!r}")

        content_type = self._config["post_limit"]["content_type"]
        if not isinstance(content_type, str) or not content_type.strip():
            raise ValueError("post_limit.content_type must be a non-empty string")

        if not isinstance(self._config["content"]["types"], list):
            raise ValueError("content.types must be a list of content type names")

    def get_app_config(self) -> AppConfig:
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=bool(app_config["debug"]),
            admin_user_ids=[str(uid).strip() for uid in app_config["admin_user_ids"]]
        )

    def get_post_limit_config(self) -> PostLimitConfig:
        return PostLimitConfig(content_type=self._config["post_limit"]["content_type"].strip())

    def get_content_config(self) -> ContentConfig:
        return ContentConfig(types=list(self._config["content"]["types"]))

    def get_paths_config(self) -> PathsConfig:
        paths_config = self._config["paths"]
        return PathsConfig(
            user_data_dir=paths_config["user_data_dir"],
            content_dir=paths_config["content_dir"]
        )

    def get_logging_config(self) -> LoggingConfig:
        logging_config = self._config["logging"]
        return LoggingConfig(
            log_file=logging_config.get("log_file") or None,
            quiet_loggers=list(logging_config.get("quiet_loggers", []))
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        self.config_file.write_text(
            json.dumps(self._config, indent=2, ensure_ascii=False), encoding="utf-8"
        )


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    return config_manager.get_app_config()


def get_post_limit_config() -> PostLimitConfig:
    return config_manager.get_post_limit_config()


def get_content_config() -> ContentConfig:
    return config_manager.get_content_config()


def get_paths_config() -> PathsConfig:
    return config_manager.get_paths_config()


def get_logging_config() -> LoggingConfig:
    return config_manager.get_logging_config()


def save_config() -> None:
    config_manager.save_config()
