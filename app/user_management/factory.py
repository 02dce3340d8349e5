"""
Factory for creating the user management module.
"""
import logging
from pathlib import Path
from typing import Iterable

from app.host.lifecycle import LifecycleOrchestrator
from .routes import create_user_routes
from .services import UserService

logger = logging.getLogger(__name__)


def create_user_management_module(
    user_data_dir: Path,
    admin_user_ids: Iterable[str],
    orchestrator: LifecycleOrchestrator
) -> dict:
    """Create the user store, session handling and profile screens.

    Args:
        user_data_dir: Directory holding one JSON record per user
        admin_user_ids: Users allowed to edit other users (and their post limits)
        orchestrator: Fires profile render/save to registered extensions

    Returns:
        Dictionary with:
        - service: UserService instance
        - blueprint: Flask blueprint
    """
    user_data_dir.mkdir(parents=True, exist_ok=True)

    admins = sorted({uid.strip() for uid in admin_user_ids if uid and uid.strip()})
    if not admins:
        logger.warning("No admin users configured: nobody will be able to edit other users or set post limits")

    user_service = UserService(user_data_dir, admins)

    return {
        "service": user_service,
        "blueprint": create_user_routes(user_service, orchestrator)
    }
