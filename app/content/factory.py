"""
Factory for creating the content module.
"""
from typing import Any, Dict

from app.host.capabilities import ContentTypeRegistry
from app.host.lifecycle import LifecycleOrchestrator
from .routes import create_content_routes
from .services import ContentRenderer, ContentService
from .store import ContentStore


def create_content_module(
    content_store: ContentStore,
    orchestrator: LifecycleOrchestrator,
    content_types: ContentTypeRegistry,
) -> Dict[str, Any]:
    """Create and configure all content components."""
    content_service = ContentService(store=content_store, orchestrator=orchestrator)
    content_renderer = ContentRenderer()

    content_bp = create_content_routes(content_service, content_renderer, content_types)

    return {
        "blueprint": content_bp,
        "service": content_service,
        "renderer": content_renderer,
        "store": content_store
    }
