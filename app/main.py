import logging
from pathlib import Path
from typing import Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from app.content.factory import create_content_module
from app.content.store import ContentStore
from app.host.factory import create_host_module
from app.host.lifecycle import LifecycleOrchestrator
from app.post_limit.factory import create_post_limit_module
from app.user_management.factory import create_user_management_module

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent.parent


def create_app(config_manager: Optional[ConfigManager] = None, base_dir: Path = BASE_DIR) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source; defaults to web_app_config.json + environment
        base_dir: Directory that relative data paths are resolved against
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    paths_config = config_manager.get_paths_config()
    content_config = config_manager.get_content_config()
    post_limit_config = config_manager.get_post_limit_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1,     # trust 1 hop for X-Forwarded-Host
            x_prefix= 1)     # <-- pay attention to X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    user_data_dir = base_dir / paths_config.user_data_dir
    content_dir = base_dir / paths_config.content_dir

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    # Shared by every module that fires or handles lifecycle events
    orchestrator = LifecycleOrchestrator()

    user_management_module = create_user_management_module(
        user_data_dir=user_data_dir,
        admin_user_ids=app_config.admin_user_ids,
        orchestrator=orchestrator
    )

    content_store = ContentStore(content_dir)

    host_module = create_host_module(
        user_service=user_management_module["service"],
        content_store=content_store,
        content_type_names=content_config.types,
        orchestrator=orchestrator
    )

    content_module = create_content_module(
        content_store=content_store,
        orchestrator=orchestrator,
        content_types=host_module["content_types"]
    )

    post_limit_module = create_post_limit_module(
        orchestrator=orchestrator,
        content_types=host_module["content_types"],
        content_type=post_limit_config.content_type
    )

    # Register blueprints
    app.register_blueprint(host_module["blueprint"])
    app.register_blueprint(user_management_module["blueprint"])
    app.register_blueprint(content_module["blueprint"])
    app.register_blueprint(post_limit_module["blueprint"])

    app.extensions["post_limit"] = post_limit_module["enforcer"]
    app.extensions["host_environment"] = host_module["environment"]

    logger.info(
        f"Application ready: limiting '{post_limit_config.content_type}', "
        f"user data in {user_data_dir}, content in {content_dir}"
    )
    return app
