"""
Extension interfaces, one per lifecycle event.

An extension implements whichever of these it needs and is handed to
LifecycleOrchestrator.register(); the orchestrator works out which events
it takes part in from the methods it provides.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Protocol, runtime_checkable

from .errors import ErrorCollection

if TYPE_CHECKING:
    from .lifecycle import RequestScope


@runtime_checkable
class CapabilityFilter(Protocol):
    """Adjusts the request-local capability sets during app init."""

    def filter_capabilities(self, scope: RequestScope) -> None:
        ...


@runtime_checkable
class ProfileRenderer(Protocol):
    """Contributes an HTML section to a user's profile screen."""

    def render_profile_section(self, scope: RequestScope, target_user_id: str) -> str:
        ...


@runtime_checkable
class ProfileSaveHandler(Protocol):
    """Handles submitted profile fields before the host saves its own."""

    def save_profile_fields(
        self,
        scope: RequestScope,
        target_user_id: str,
        form: Mapping[str, str],
        errors: ErrorCollection,
    ) -> None:
        ...


@runtime_checkable
class ContentGatekeeper(Protocol):
    """Inspects a content record about to be saved.

    Returns the (possibly modified) record, or halts the request through the
    host to refuse the save.
    """

    def filter_content_data(self, scope: RequestScope, data: Dict[str, Any]) -> Dict[str, Any]:
        ...


@runtime_checkable
class NoticeProvider(Protocol):
    """Supplies HTML notices for the admin dashboard."""

    def render_notices(self, scope: RequestScope) -> List[str]:
        ...
