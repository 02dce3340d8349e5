"""
Factory for creating the host module.
"""
from typing import Iterable

from app.content.store import ContentStore
from app.user_management.services import UserService

from .capabilities import ContentTypeRegistry
from .lifecycle import LifecycleOrchestrator
from .platform import HostEnvironment
from .routes import create_host_routes


def create_host_module(
    user_service: UserService,
    content_store: ContentStore,
    content_type_names: Iterable[str],
    orchestrator: LifecycleOrchestrator,
) -> dict:
    """
    Create the host module.

    Args:
        user_service: User store and authentication
        content_store: Content item storage
        content_type_names: Content types to register
        orchestrator: Lifecycle orchestrator shared with the other modules

    Returns:
        Dictionary with:
        - environment: HostEnvironment instance
        - content_types: ContentTypeRegistry instance
        - blueprint: Flask blueprint
    """
    content_types = ContentTypeRegistry(content_type_names)

    environment = HostEnvironment(
        user_service=user_service,
        content_store=content_store,
        content_types=content_types,
        orchestrator=orchestrator,
    )

    blueprint = create_host_routes(environment)

    return {
        "environment": environment,
        "content_types": content_types,
        "blueprint": blueprint,
    }
