"""
Concrete host platform.

HostEnvironment holds the app-lifetime collaborators; for every inbound request
it builds a HostPlatform bound to the acting user and to request-local copies
of the content type capabilities, wraps it in a RequestScope and fires app init.
"""
import logging
from typing import Any, Dict, Iterable, NoReturn, Optional

from app.content.models import ContentStatus
from app.content.store import ContentStore
from app.user_management.services import UserService

from .capabilities import CapabilitySet, ContentTypeRegistry
from .errors import ErrorCollection, RequestHalted
from .lifecycle import LifecycleOrchestrator, RequestScope

logger = logging.getLogger(__name__)

# User-level capabilities
EDIT_USERS = "edit_users"
EDIT_USER = "edit_user"


class HostPlatform:
    """Host services as seen from one request."""

    def __init__(
        self,
        user_service: UserService,
        content_store: ContentStore,
        capabilities: Dict[str, CapabilitySet],
        actor_id: Optional[str],
    ):
        self.user_service = user_service
        self.content_store = content_store
        self._capabilities = capabilities
        self._actor_id = actor_id

    def get_current_actor_id(self) -> Optional[str]:
        return self._actor_id

    # User metadata

    def get_user_meta(self, user_id: Optional[str], key: str) -> Any:
        """Return the stored value, or None when unset."""
        if not user_id:
            return None
        return self.user_service.get_user_data(user_id).get_meta(key)

    def set_user_meta(self, user_id: str, key: str, value: Any) -> None:
        self.user_service.get_user_data(user_id).set_meta(key, value)

    def delete_user_meta(self, user_id: Optional[str], key: str) -> bool:
        if not user_id:
            return False
        return self.user_service.get_user_data(user_id).delete_meta(key)

    def add_user_meta_once(self, user_id: str, key: str, value: Any) -> bool:
        return self.user_service.get_user_data(user_id).add_meta_once(key, value)

    # Content

    def count_content_items(
        self,
        author_id: Optional[str],
        content_type: str,
        exclude_statuses: Iterable[str] = (ContentStatus.TRASH.value,),
    ) -> int:
        if not author_id:
            return 0
        return self.content_store.count_by_author(author_id, content_type, exclude_statuses)

    # Permissions

    def current_actor_can(self, capability: str, target_user_id: Optional[str] = None) -> bool:
        """Check a user-level capability for the actor, optionally against a target user."""
        actor_id = self._actor_id
        if not actor_id:
            return False

        is_admin = self.user_service.is_admin_user(actor_id)
        if capability == EDIT_USERS:
            return is_admin
        if capability == EDIT_USER:
            return is_admin or (target_user_id is not None and target_user_id == actor_id)

        logger.debug(f"Unknown capability requested: {capability}")
        return False

    def get_content_type_capabilities(self, content_type: str) -> CapabilitySet:
        """The request-local, mutable capability set of a content type.

        Raises:
            KeyError: If the content type is not registered
        """
        return self._capabilities[content_type]

    def actor_can_for_type(self, content_type: str, capability: str) -> bool:
        """Check a content type capability flag for the actor."""
        if not self._actor_id or content_type not in self._capabilities:
            return False
        return self._capabilities[content_type].allows(capability)

    # Error channels

    def halt_request_with_message(self, message: str) -> NoReturn:
        logger.info(f"Halting request for {self._actor_id}: {message}")
        raise RequestHalted(message)

    def attach_validation_error(
        self,
        errors: ErrorCollection,
        code: str,
        message: str,
        blocking: bool = True,
    ) -> None:
        errors.add(code, message, blocking=blocking)


class HostEnvironment:
    """App-lifetime host collaborators."""

    def __init__(
        self,
        user_service: UserService,
        content_store: ContentStore,
        content_types: ContentTypeRegistry,
        orchestrator: LifecycleOrchestrator,
    ):
        self.user_service = user_service
        self.content_store = content_store
        self.content_types = content_types
        self.orchestrator = orchestrator

    def open_scope(self, actor_id: Optional[str]) -> RequestScope:
        """Build the scope for one request and run app init on it."""
        platform = HostPlatform(
            user_service=self.user_service,
            content_store=self.content_store,
            capabilities=self.content_types.snapshot(),
            actor_id=actor_id,
        )
        scope = RequestScope(host=platform)
        self.orchestrator.initialize(scope)
        return scope
