"""
Content data models.

Pydantic models for stored content items and for the payloads clients submit.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ContentStatus(str, Enum):
    """Publication status of a content item."""
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISH = "publish"
    PRIVATE = "private"
    TRASH = "trash"


class ContentItem(BaseModel):
    """A stored content item."""
    id: str = Field(description="Item identifier (hex uuid)")
    author_id: str = Field(description="User ID of the author")
    content_type: str = Field(description="Content type slug, e.g. 'post'")
    status: ContentStatus = Field(default=ContentStatus.DRAFT, description="Publication status")
    title: str = Field(default="", description="Item title")
    body: str = Field(default="", description="Markdown body")
    created_at: str = Field(description="Creation time in ISO format")
    updated_at: str = Field(description="Last update time in ISO format")

    @property
    def is_trashed(self) -> bool:
        return self.status == ContentStatus.TRASH

    def to_record(self) -> Dict[str, Any]:
        """Mutable record handed to the content pre-save pipeline."""
        return {
            "id": self.id,
            "author_id": self.author_id,
            "content_type": self.content_type,
            "status": self.status.value,
            "title": self.title,
            "body": self.body,
        }


class ContentPayload(BaseModel):
    """Fields a client may submit when creating or updating an item."""
    content_type: str = Field(default="post", min_length=1, max_length=40)
    status: ContentStatus = Field(default=ContentStatus.DRAFT)
    title: str = Field(default="", max_length=200)
    body: str = Field(default="")

    def to_record(self, author_id: str, item_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "id": item_id,
            "author_id": author_id,
            "content_type": self.content_type,
            "status": self.status.value,
            "title": self.title,
            "body": self.body,
        }
