"""
JSON file storage for content items, one file per item.
"""
import json
import logging
import re
import uuid
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from pydantic import ValidationError

from .models import ContentItem, ContentStatus

logger = logging.getLogger(__name__)

_ITEM_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class ContentStore:
    """Reads and writes content items under a single directory."""

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir
        self.content_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def is_valid_id(item_id: str) -> bool:
        return bool(item_id) and bool(_ITEM_ID_PATTERN.match(item_id))

    def _item_file(self, item_id: str) -> Path:
        return self.content_dir / f"{item_id}.json"

    def _read(self, path: Path) -> Optional[ContentItem]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return ContentItem.model_validate(data)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Skipping unreadable content file {path.name}: {e}")
            return None

    def get(self, item_id: str) -> Optional[ContentItem]:
        """Load one item, or None if the id is malformed or unknown."""
        if not self.is_valid_id(item_id):
            return None
        return self._read(self._item_file(item_id))

    def save(self, item: ContentItem) -> None:
        """Write an item, replacing any previous version."""
        self._item_file(item.id).write_text(
            json.dumps(item.model_dump(mode="json"), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def iter_items(self) -> Iterator[ContentItem]:
        for path in sorted(self.content_dir.glob("*.json")):
            item = self._read(path)
            if item is not None:
                yield item

    def list_by_author(
        self,
        author_id: str,
        content_type: Optional[str] = None,
        exclude_statuses: Iterable[str] = (),
    ) -> List[ContentItem]:
        """Items by one author, newest first, optionally filtered by type and status."""
        excluded = {ContentStatus(status) for status in exclude_statuses}
        items = [
            item for item in self.iter_items()
            if item.author_id == author_id
            and (content_type is None or item.content_type == content_type)
            and item.status not in excluded
        ]
        items.sort(key=lambda item: item.created_at, reverse=True)
        return items

    def count_by_author(
        self,
        author_id: str,
        content_type: str,
        exclude_statuses: Iterable[str] = (ContentStatus.TRASH.value,),
    ) -> int:
        return len(self.list_by_author(author_id, content_type, exclude_statuses))
