"""
Request scope and lifecycle orchestration.

RequestScope is built once per inbound request and passed to every extension
call. LifecycleOrchestrator dispatches each lifecycle event to the extensions
registered for it, in registration order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Hashable, List, Mapping, Optional

from flask import g

from .errors import ErrorCollection
from .events import LifecycleEvent
from .extensions import (
    CapabilityFilter,
    ContentGatekeeper,
    NoticeProvider,
    ProfileRenderer,
    ProfileSaveHandler,
)

if TYPE_CHECKING:
    from .platform import HostPlatform

logger = logging.getLogger(__name__)


@dataclass
class RequestScope:
    """State that lives exactly as long as one request."""
    host: HostPlatform
    _memo: Dict[Hashable, Any] = field(default_factory=dict, init=False, repr=False)

    @property
    def actor_id(self) -> Optional[str]:
        return self.host.get_current_actor_id()

    def remember(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the value cached under key, computing it on first use."""
        if key not in self._memo:
            self._memo[key] = compute()
        return self._memo[key]

    def forget(self, key: Hashable) -> None:
        """Drop a cached value so the next remember() recomputes it."""
        self._memo.pop(key, None)


def current_scope() -> RequestScope:
    """The scope opened for the request being served."""
    return g.request_scope


class LifecycleOrchestrator:
    """Invokes registered extensions at the host's lifecycle points."""

    _INTERFACES = (
        (LifecycleEvent.APP_INIT, CapabilityFilter),
        (LifecycleEvent.PROFILE_RENDER, ProfileRenderer),
        (LifecycleEvent.PROFILE_SAVE, ProfileSaveHandler),
        (LifecycleEvent.CONTENT_PRE_SAVE, ContentGatekeeper),
        (LifecycleEvent.ADMIN_NOTICES, NoticeProvider),
    )

    def __init__(self):
        self._extensions: Dict[LifecycleEvent, List[Any]] = {event: [] for event, _ in self._INTERFACES}

    def register(self, extension: Any) -> List[LifecycleEvent]:
        """
        Register an extension for every event whose interface it implements.

        Returns:
            The events the extension was registered for

        Raises:
            TypeError: If the extension implements none of the interfaces
        """
        events = []
        for event, interface in self._INTERFACES:
            if isinstance(extension, interface):
                self._extensions[event].append(extension)
                events.append(event)

        if not events:
            raise TypeError(f"{type(extension).__name__} implements no lifecycle interface")

        logger.info(
            f"Registered {type(extension).__name__} for events: {', '.join(e.value for e in events)}"
        )
        return events

    def extensions_for(self, event: LifecycleEvent) -> List[Any]:
        return list(self._extensions[event])

    def initialize(self, scope: RequestScope) -> None:
        """App init: let extensions adjust the request-local capabilities."""
        for extension in self._extensions[LifecycleEvent.APP_INIT]:
            extension.filter_capabilities(scope)

    def render_profile(self, scope: RequestScope, target_user_id: str) -> List[str]:
        sections = []
        for extension in self._extensions[LifecycleEvent.PROFILE_RENDER]:
            section = extension.render_profile_section(scope, target_user_id)
            if section:
                sections.append(section)
        return sections

    def save_profile(
        self,
        scope: RequestScope,
        target_user_id: str,
        form: Mapping[str, str],
        errors: ErrorCollection,
    ) -> None:
        for extension in self._extensions[LifecycleEvent.PROFILE_SAVE]:
            extension.save_profile_fields(scope, target_user_id, form, errors)

    def filter_content(self, scope: RequestScope, data: Dict[str, Any]) -> Dict[str, Any]:
        """Pass a content record through every gatekeeper in turn."""
        for extension in self._extensions[LifecycleEvent.CONTENT_PRE_SAVE]:
            data = extension.filter_content_data(scope, data)
        return data

    def render_notices(self, scope: RequestScope) -> List[str]:
        notices = []
        for extension in self._extensions[LifecycleEvent.ADMIN_NOTICES]:
            notices.extend(extension.render_notices(scope))
        return notices
