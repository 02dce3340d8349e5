"""
Content services: the content-saving pipeline and rendering.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import markdown

from app.host.lifecycle import LifecycleOrchestrator, RequestScope
from .models import ContentItem, ContentPayload, ContentStatus
from .store import ContentStore

logger = logging.getLogger(__name__)


class ContentService:
    """Saves content items through the content pre-save pipeline.

    Every write, including trashing, goes through LifecycleOrchestrator.filter_content()
    before anything is stored. A gatekeeper that halts the request leaves the
    store untouched.
    """

    def __init__(self, store: ContentStore, orchestrator: LifecycleOrchestrator):
        self.store = store
        self.orchestrator = orchestrator

    def get(self, item_id: str) -> Optional[ContentItem]:
        return self.store.get(item_id)

    def list_for_author(self, author_id: str, content_type: Optional[str] = None) -> List[ContentItem]:
        return self.store.list_by_author(author_id, content_type)

    def create(self, scope: RequestScope, payload: ContentPayload) -> ContentItem:
        """Create a new item authored by the current actor."""
        record = payload.to_record(author_id=scope.actor_id)
        return self._save(scope, record)

    def update(self, scope: RequestScope, item: ContentItem, payload: ContentPayload) -> ContentItem:
        """Apply the submitted fields over the item, keeping its id, author and creation time.

        Fields the client left out keep their stored values; payload defaults
        never overwrite them.
        """
        record = item.to_record()
        record.update(payload.model_dump(mode="json", exclude_unset=True))
        return self._save(scope, record, existing=item)

    def trash(self, scope: RequestScope, item: ContentItem) -> ContentItem:
        """Move an item to the trash."""
        record = item.to_record()
        record["status"] = ContentStatus.TRASH.value
        return self._save(scope, record, existing=item)

    def _save(
        self,
        scope: RequestScope,
        record: Dict[str, Any],
        existing: Optional[ContentItem] = None,
    ) -> ContentItem:
        record = self.orchestrator.filter_content(scope, record)

        now = datetime.now().isoformat()
        item = ContentItem(
            id=record.get("id") or self.store.new_id(),
            author_id=record["author_id"],
            content_type=record["content_type"],
            status=record["status"],
            title=record.get("title", ""),
            body=record.get("body", ""),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.store.save(item)

        action = "Updated" if existing else "Created"
        logger.info(f"{action} {item.content_type} {item.id} by {item.author_id} (status={item.status.value})")
        return item


class ContentRenderer:
    """Service for rendering content bodies."""

    def render_markdown(self, md_text: str) -> str:
        """Convert Markdown → HTML (GitHub-flavoured-ish)."""
        return markdown.markdown(
            md_text,
            extensions=[
                "fenced_code",
                "tables",
                "attr_list",
            ],
        )
