"""
Lifecycle Events of the Host

Defines the fixed points at which the host calls into registered extensions.
"""

from enum import Enum


class LifecycleEvent(Enum):
    """Host lifecycle events, in the order a typical request meets them."""

    # Fired once per request, before any route runs
    APP_INIT = "app_init"

    # User profile screen
    PROFILE_RENDER = "profile_render"
    PROFILE_SAVE = "profile_save"

    # Content saving pipeline
    CONTENT_PRE_SAVE = "content_pre_save"

    # Admin dashboard
    ADMIN_NOTICES = "admin_notices"

    @classmethod
    def is_valid(cls, event_name: str) -> bool:
        """Check if an event name string is valid."""
        try:
            cls(event_name)
            return True
        except ValueError:
            return False

    @classmethod
    def get_event_names(cls) -> set[str]:
        """Get all event name strings."""
        return {e.value for e in cls}
