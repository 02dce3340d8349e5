"""Host services the post limit enforcer relies on."""

from typing import Any, Iterable, NoReturn, Optional, Protocol

from app.host.capabilities import CapabilitySet
from app.host.errors import ErrorCollection


class PostLimitHost(Protocol):
    """Host contract used by QuotaEnforcer.

    One instance serves one request; "actor" always means the user on whose
    behalf that request runs.
    """

    def get_current_actor_id(self) -> Optional[str]:
        ...

    def get_user_meta(self, user_id: Optional[str], key: str) -> Any:
        """Return the stored value, or None when unset."""
        ...

    def set_user_meta(self, user_id: str, key: str, value: Any) -> None:
        ...

    def delete_user_meta(self, user_id: Optional[str], key: str) -> bool:
        ...

    def add_user_meta_once(self, user_id: str, key: str, value: Any) -> bool:
        """Store value only if key is unset. Returns True if it was stored."""
        ...

    def count_content_items(
        self,
        author_id: Optional[str],
        content_type: str,
        exclude_statuses: Iterable[str] = ("trash",),
    ) -> int:
        ...

    def current_actor_can(self, capability: str, target_user_id: Optional[str] = None) -> bool:
        ...

    def get_content_type_capabilities(self, content_type: str) -> CapabilitySet:
        """Mutable capability set that only lives for the current request."""
        ...

    def halt_request_with_message(self, message: str) -> NoReturn:
        """Abort the in-flight request with a user-facing message."""
        ...

    def attach_validation_error(
        self,
        errors: ErrorCollection,
        code: str,
        message: str,
        blocking: bool = True,
    ) -> None:
        ...
