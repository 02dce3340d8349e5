"""
Factory for creating the post limit module.
"""

from app.host.capabilities import ContentTypeRegistry
from app.host.lifecycle import LifecycleOrchestrator

from .enforcer import QuotaEnforcer
from .models import DEFAULT_CONTENT_TYPE
from .routes import create_post_limit_routes


def create_post_limit_module(
    orchestrator: LifecycleOrchestrator,
    content_types: ContentTypeRegistry,
    content_type: str = DEFAULT_CONTENT_TYPE,
) -> dict:
    """
    Create the post limit module and hook it into the host lifecycle.

    Args:
        orchestrator: Lifecycle orchestrator to register the enforcer with
        content_types: Registry the limited content type must exist in
        content_type: Slug of the content type to limit

    Returns:
        Dictionary with:
        - enforcer: QuotaEnforcer instance
        - blueprint: Flask blueprint
    """
    content_types.ensure(content_type)

    enforcer = QuotaEnforcer(content_type=content_type)
    orchestrator.register(enforcer)

    blueprint = create_post_limit_routes(enforcer)

    return {
        "enforcer": enforcer,
        "blueprint": blueprint
    }
