"""
Per-user post limit enforcement.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from app.host.errors import ErrorCollection
from app.host.lifecycle import RequestScope
from app.host.platform import EDIT_USER, EDIT_USERS

from .models import (
    ALREADY_OVER_LIMIT_CODE,
    ALREADY_OVER_LIMIT_MESSAGE,
    DEFAULT_CONTENT_TYPE,
    INVALID_LIMIT_CODE,
    INVALID_LIMIT_MESSAGE,
    LIMIT_REACHED_NOTICE,
    NOTICE_SHOWN_KEY,
    OVER_LIMIT_MESSAGE,
    POST_LIMIT_FIELD,
    POST_LIMIT_KEY,
    QuotaSnapshot,
    coerce_stored_limit,
    parse_post_limit,
)
from .ports import PostLimitHost
from .templates import render_notice, render_profile_section

logger = logging.getLogger(__name__)

TRASH_STATUS = "trash"


class QuotaEnforcer:
    """
    Limits how many items of one content type each user may author.

    Administrators set a per-user limit on the profile screen (0 means no limit).
    Once a user's non-trashed item count reaches the limit:
    - further saves of that content type are halted (trashing is always allowed)
    - the create/publish capabilities of the content type are withdrawn for the request
    - a warning notice is shown once on the dashboard, re-armed when the limit
      changes or one of the user's items is trashed

    Limits and counts are memoized in the RequestScope, keyed by user, so they
    are computed at most once per request and never leak between users or requests.
    Every query takes an optional user_id; omitted, it means the current actor.
    """

    def __init__(self, content_type: str = DEFAULT_CONTENT_TYPE):
        """
        Initialize QuotaEnforcer.

        Args:
            content_type: Slug of the content type to limit
        """
        self.content_type = content_type

    # =====================
    # Quota queries
    # =====================

    def _resolve_user(self, scope: RequestScope, user_id: Optional[str]) -> Optional[str]:
        return user_id if user_id is not None else scope.host.get_current_actor_id()

    def _memo_key(self, user_id: Optional[str], part: str) -> tuple:
        return ("post_limit", self.content_type, user_id, part)

    def get_limit(self, scope: RequestScope, user_id: Optional[str] = None) -> int:
        """The user's post limit; 0 means unlimited."""
        user_id = self._resolve_user(scope, user_id)
        host: PostLimitHost = scope.host
        return scope.remember(
            self._memo_key(user_id, "limit"),
            lambda: coerce_stored_limit(host.get_user_meta(user_id, POST_LIMIT_KEY), user_id),
        )

    def get_post_count(self, scope: RequestScope, user_id: Optional[str] = None) -> int:
        """Number of the user's non-trashed items of the limited content type."""
        user_id = self._resolve_user(scope, user_id)
        host: PostLimitHost = scope.host
        return scope.remember(
            self._memo_key(user_id, "count"),
            lambda: host.count_content_items(user_id, self.content_type, exclude_statuses=(TRASH_STATUS,)),
        )

    def has_limit(self, scope: RequestScope, user_id: Optional[str] = None) -> bool:
        return self.get_limit(scope, user_id) != 0

    def is_at_limit(self, scope: RequestScope, user_id: Optional[str] = None) -> bool:
        """True only when the count equals the limit exactly."""
        return self.has_limit(scope, user_id) and self.get_post_count(scope, user_id) == self.get_limit(scope, user_id)

    def is_at_or_over_limit(self, scope: RequestScope, user_id: Optional[str] = None) -> bool:
        return self.has_limit(scope, user_id) and self.get_post_count(scope, user_id) >= self.get_limit(scope, user_id)

    def snapshot(self, scope: RequestScope, user_id: Optional[str] = None) -> QuotaSnapshot:
        user_id = self._resolve_user(scope, user_id)
        return QuotaSnapshot(
            user_id=user_id,
            limit=self.get_limit(scope, user_id),
            count=self.get_post_count(scope, user_id),
        )

    def _forget(self, scope: RequestScope, user_id: Optional[str]) -> None:
        scope.forget(self._memo_key(user_id, "limit"))
        scope.forget(self._memo_key(user_id, "count"))

    # =====================
    # Lifecycle events
    # =====================

    def filter_capabilities(self, scope: RequestScope) -> None:
        """Withdraw create/publish for this request once the actor is at the limit."""
        if not self.is_at_or_over_limit(scope):
            return

        host: PostLimitHost = scope.host
        capabilities = host.get_content_type_capabilities(self.content_type)
        capabilities.create_posts = False
        capabilities.publish_posts = False
        logger.info(f"Removed create/publish on '{self.content_type}' for {host.get_current_actor_id()}")

    def render_profile_section(self, scope: RequestScope, target_user_id: str) -> str:
        """Post limit input for the profile screen, shown to user administrators only."""
        host: PostLimitHost = scope.host
        if not host.current_actor_can(EDIT_USERS):
            return ""

        post_limit = coerce_stored_limit(host.get_user_meta(target_user_id, POST_LIMIT_KEY), target_user_id)
        return render_profile_section(POST_LIMIT_FIELD, post_limit)

    def save_profile_fields(
        self,
        scope: RequestScope,
        target_user_id: str,
        form: Mapping[str, str],
        errors: ErrorCollection,
    ) -> None:
        """Save a submitted post limit, or report why it was refused."""
        host: PostLimitHost = scope.host

        # Non-admins must not be able to raise their own limit
        if not host.current_actor_can(EDIT_USERS):
            return

        # The field only exists on forms that rendered the section
        if POST_LIMIT_FIELD not in form:
            return

        post_limit = parse_post_limit(form.get(POST_LIMIT_FIELD))
        can_edit_target = host.current_actor_can(EDIT_USER, target_user_id)

        if post_limit is None or not can_edit_target:
            host.attach_validation_error(errors, INVALID_LIMIT_CODE, INVALID_LIMIT_MESSAGE)
            logger.info(f"Rejected post limit {form.get(POST_LIMIT_FIELD)!r} for {target_user_id}")
            return

        host.set_user_meta(target_user_id, POST_LIMIT_KEY, post_limit)
        # A new limit re-arms the notice
        host.delete_user_meta(target_user_id, NOTICE_SHOWN_KEY)
        self._forget(scope, target_user_id)
        logger.info(f"Set post limit for {target_user_id} to {post_limit} by {host.get_current_actor_id()}")

        if post_limit and self.get_post_count(scope, target_user_id) > post_limit:
            host.attach_validation_error(
                errors, ALREADY_OVER_LIMIT_CODE, ALREADY_OVER_LIMIT_MESSAGE, blocking=False
            )

    def filter_content_data(self, scope: RequestScope, data: Dict[str, Any]) -> Dict[str, Any]:
        """Halt saves of the limited content type while the actor is at the limit."""
        if data.get("content_type") != self.content_type:
            return data

        host: PostLimitHost = scope.host

        if data.get("status") == TRASH_STATUS:
            # Trashing is always allowed and re-arms the author's notice
            author_id = data.get("author_id") or host.get_current_actor_id()
            host.delete_user_meta(author_id, NOTICE_SHOWN_KEY)
            return data

        if self.is_at_or_over_limit(scope):
            snapshot = self.snapshot(scope)
            logger.info(
                f"Blocked {self.content_type} save for {snapshot.user_id}: "
                f"{snapshot.count}/{snapshot.limit}"
            )
            host.halt_request_with_message(OVER_LIMIT_MESSAGE)

        return data

    def render_notices(self, scope: RequestScope) -> List[str]:
        """Warn the actor once per limit-reached episode."""
        host: PostLimitHost = scope.host
        actor_id = host.get_current_actor_id()
        if not actor_id:
            return []

        if host.get_user_meta(actor_id, NOTICE_SHOWN_KEY) or not self.is_at_or_over_limit(scope):
            return []

        host.add_user_meta_once(actor_id, NOTICE_SHOWN_KEY, True)
        logger.info(f"Showing post limit notice to {actor_id}")
        return [render_notice(LIMIT_REACHED_NOTICE)]
