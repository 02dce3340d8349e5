"""
Content type capability registry.

Each registered content type carries a default CapabilitySet. Requests never
touch the defaults: they work on copies handed out by ContentTypeRegistry.snapshot().
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List

logger = logging.getLogger(__name__)


@dataclass
class CapabilitySet:
    """Boolean capability flags for one content type."""
    create_posts: bool = True
    publish_posts: bool = True
    edit_posts: bool = True
    delete_posts: bool = True

    def allows(self, capability: str) -> bool:
        """Check a flag by name; unknown names are never allowed."""
        return bool(getattr(self, capability, False))

    def copy(self) -> "CapabilitySet":
        return replace(self)

    def to_dict(self) -> Dict[str, bool]:
        return {
            "create_posts": self.create_posts,
            "publish_posts": self.publish_posts,
            "edit_posts": self.edit_posts,
            "delete_posts": self.delete_posts,
        }


@dataclass
class ContentType:
    """A registered content type."""
    name: str
    label: str
    capabilities: CapabilitySet


class ContentTypeRegistry:
    """Registry of the content types the host knows about."""

    def __init__(self, names: Iterable[str] = ()):
        self._types: Dict[str, ContentType] = {}
        for name in names:
            self.register(name)

    def register(self, name: str, label: str = None, capabilities: CapabilitySet = None) -> ContentType:
        """Register a content type, replacing any previous registration."""
        content_type = ContentType(
            name=name,
            label=label or f"{name.capitalize()}s",
            capabilities=capabilities or CapabilitySet(),
        )
        self._types[name] = content_type
        logger.debug(f"Registered content type: {name}")
        return content_type

    def ensure(self, name: str) -> ContentType:
        """Return the named content type, registering it when unknown."""
        if name not in self._types:
            logger.warning(f"Content type '{name}' was not configured, registering it with default capabilities")
            return self.register(name)
        return self._types[name]

    def get(self, name: str) -> ContentType:
        return self._types[name]

    def names(self) -> List[str]:
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def snapshot(self) -> Dict[str, CapabilitySet]:
        """Fresh, request-local copies of every content type's capabilities."""
        return {name: ct.capabilities.copy() for name, ct in self._types.items()}
