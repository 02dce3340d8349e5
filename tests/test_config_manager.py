"""
Test cases for the configuration management system.
Tests config loading, environment overrides, and access functionality.
"""

import os
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

import config_manager as config_module
from config_manager import (
    ConfigManager,
    AppConfig,
    PostLimitConfig,
    ContentConfig,
    PathsConfig,
    LoggingConfig,
    get_app_config,
    get_post_limit_config,
    get_content_config,
    get_paths_config,
)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.json"

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir)

    def write_config(self, data):
        self.config_file.write_text(json.dumps(data), encoding="utf-8")

    def test_defaults_without_config_file(self):
        """Test that defaults apply when the config file does not exist."""
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))

        app_config = manager.get_app_config()
        assert app_config.host == "0.0.0.0"
        assert app_config.port == 22581
        assert app_config.debug is False
        assert app_config.admin_user_ids == []

        assert manager.get_post_limit_config().content_type == "post"
        assert manager.get_content_config().types == ["post", "page"]

        paths_config = manager.get_paths_config()
        assert paths_config.user_data_dir == "user_data"
        assert paths_config.content_dir == "content"

    def test_load_config_from_file(self):
        """Test loading configuration from an existing file."""
        self.write_config({
            "app": {
                "host": "localhost",
                "port": 8080,
                "debug": True,
                "admin_user_ids": ["admin1", "admin2"]
            },
            "post_limit": {"content_type": "article"},
            "content": {"types": ["article", "page"]},
            "paths": {
                "user_data_dir": "test_user_data",
                "content_dir": "test_content"
            }
        })

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))

        assert manager.get_app_config() == AppConfig(
            host="localhost", port=8080, debug=True, admin_user_ids=["admin1", "admin2"]
        )
        assert manager.get_post_limit_config() == PostLimitConfig(content_type="article")
        assert manager.get_content_config() == ContentConfig(types=["article", "page"])
        assert manager.get_paths_config() == PathsConfig(
            user_data_dir="test_user_data", content_dir="test_content"
        )

    def test_partial_file_merges_with_defaults(self):
        """Test that missing keys fall back to defaults."""
        self.write_config({"app": {"port": 9000}})

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))

        app_config = manager.get_app_config()
        assert app_config.port == 9000
        assert app_config.host == "0.0.0.0"
        assert manager.get_post_limit_config().content_type == "post"

    def test_invalid_json_uses_defaults(self):
        """Test that an unreadable config file is ignored."""
        self.config_file.write_text("{not json", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))

        assert manager.get_app_config().port == 22581

    def test_environment_overrides(self):
        """Test that environment variables take precedence over the file."""
        self.write_config({"app": {"host": "localhost", "port": 8080}})
        env = {
            "APP_HOST": "127.0.0.1",
            "APP_PORT": "5000",
            "APP_DEBUG": "TRUE",
            "ADMIN_USER_IDS": "root, admin ,,",
            "POST_LIMIT_CONTENT_TYPE": " story ",
            "CONTENT_TYPES": "story,page",
            "USER_DATA_DIR": "/var/lib/users",
            "CONTENT_DIR": "/var/lib/content",
        }

        with patch.dict(os.environ, env, clear=True):
            manager = ConfigManager(str(self.config_file))

        app_config = manager.get_app_config()
        assert app_config.host == "127.0.0.1"
        assert app_config.port == 5000
        assert app_config.debug is True
        assert app_config.admin_user_ids == ["root", "admin"]
        assert manager.get_post_limit_config().content_type == "story"
        assert manager.get_content_config().types == ["story", "page"]
        assert manager.get_paths_config().user_data_dir == "/var/lib/users"
        assert manager.get_paths_config().content_dir == "/var/lib/content"

    def test_reload_picks_up_file_changes(self):
        """Test that reload() re-reads the config file."""
        self.write_config({"post_limit": {"content_type": "post"}})

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))
            self.write_config({"post_limit": {"content_type": "page"}})
            manager.reload()

        assert manager.get_post_limit_config().content_type == "page"

    def test_save_config_round_trip(self):
        """Test that a saved config file loads back the same values."""
        self.write_config({"app": {"admin_user_ids": ["admin"]}})

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))
            manager.save_config()
            reloaded = ConfigManager(str(self.config_file))

        assert reloaded.get_config() == manager.get_config()
        assert json.loads(self.config_file.read_text(encoding="utf-8"))["app"]["admin_user_ids"] == ["admin"]

    def test_logging_section(self):
        """Test the logging defaults and the LOG_FILE override."""
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))
        logging_config = manager.get_logging_config()
        assert logging_config.log_file is None
        assert "werkzeug" in logging_config.quiet_loggers

        with patch.dict(os.environ, {"LOG_FILE": "logs/app.log"}, clear=True):
            manager = ConfigManager(str(self.config_file))
        assert manager.get_logging_config() == LoggingConfig(
            log_file="logs/app.log", quiet_loggers=["werkzeug", "urllib3", "asyncio", "MARKDOWN"]
        )

    def test_invalid_env_value_raises(self):
        """Test that a malformed numeric override names the variable."""
        with patch.dict(os.environ, {"APP_PORT": "eighty"}, clear=True):
            with pytest.raises(ValueError, match="APP_PORT"):
                ConfigManager(str(self.config_file))

    def test_invalid_file_values_raise(self):
        """Test that settings the app cannot start with are rejected."""
        self.write_config({"app": {"port": 70000}})
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="app.port"):
                ConfigManager(str(self.config_file))

        self.write_config({"post_limit": {"content_type": "  "}})
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="content_type"):
                ConfigManager(str(self.config_file))

    def test_non_object_file_is_ignored(self):
        self.write_config(["not", "an", "object"])
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))
        assert manager.get_app_config().port == 22581

    def test_get_config_returns_copy(self):
        """Test that callers cannot replace sections of the live config."""
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(self.config_file))

        config = manager.get_config()
        config["app"] = {}
        assert manager.get_app_config().port == 22581


class TestGlobalConfigFunctions:
    """Test the module-level accessors."""

    def test_accessors_delegate_to_global_manager(self):
        """Test that the accessors read from the global instance."""
        temp_dir = tempfile.mkdtemp()
        try:
            config_file = Path(temp_dir) / "config.json"
            config_file.write_text(json.dumps({
                "app": {"admin_user_ids": ["boss"]},
                "post_limit": {"content_type": "note"}
            }), encoding="utf-8")

            with patch.dict(os.environ, {}, clear=True):
                manager = ConfigManager(str(config_file))

            with patch.object(config_module, "config_manager", manager):
                assert get_app_config().admin_user_ids == ["boss"]
                assert get_post_limit_config().content_type == "note"
                assert get_content_config().types == ["post", "page"]
                assert get_paths_config().user_data_dir == "user_data"
        finally:
            import shutil
            shutil.rmtree(temp_dir)
