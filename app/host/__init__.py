"""
Host platform: the services, lifecycle events and extension interfaces that
extensions such as the post limit enforcer plug into.
"""

from .capabilities import CapabilitySet, ContentTypeRegistry
from .errors import ErrorCollection, ErrorEntry, RequestHalted
from .events import LifecycleEvent
from .extensions import (
    CapabilityFilter,
    ContentGatekeeper,
    NoticeProvider,
    ProfileRenderer,
    ProfileSaveHandler,
)
from .lifecycle import LifecycleOrchestrator, RequestScope

__all__ = [
    "CapabilitySet",
    "ContentTypeRegistry",
    "ErrorCollection",
    "ErrorEntry",
    "RequestHalted",
    "LifecycleEvent",
    "CapabilityFilter",
    "ContentGatekeeper",
    "NoticeProvider",
    "ProfileRenderer",
    "ProfileSaveHandler",
    "LifecycleOrchestrator",
    "RequestScope",
]
