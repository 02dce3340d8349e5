"""
Data models and constants for the post limit module.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Per-user metadata keys
POST_LIMIT_KEY = "post_limit"
NOTICE_SHOWN_KEY = "post_limit_notice_shown"

# Profile form field
POST_LIMIT_FIELD = "post-limit"

DEFAULT_CONTENT_TYPE = "post"

# Error codes attached to the profile-save error collection
INVALID_LIMIT_CODE = "post_limit_error"
ALREADY_OVER_LIMIT_CODE = "post_limit_notice"

INVALID_LIMIT_MESSAGE = "ERROR: The post limit isn't correct."
ALREADY_OVER_LIMIT_MESSAGE = "Notice: User is already over the limit"
OVER_LIMIT_MESSAGE = "You are over your post limit."
LIMIT_REACHED_NOTICE = "Notice: You have reached your post limit and can not add more posts."

# Optional sign, no leading zeros
_INTEGER_PATTERN = re.compile(r"^[+-]?(0|[1-9][0-9]*)$")


@dataclass(frozen=True)
class QuotaSnapshot:
    """Limit and count of one user, with the predicates derived from them."""
    user_id: Optional[str]
    limit: int
    count: int

    @property
    def has_limit(self) -> bool:
        return self.limit != 0

    @property
    def at_limit(self) -> bool:
        return self.has_limit and self.count == self.limit

    @property
    def at_or_over_limit(self) -> bool:
        return self.has_limit and self.count >= self.limit

    @property
    def remaining(self) -> Optional[int]:
        """Items left before the limit, or None when unlimited."""
        if not self.has_limit:
            return None
        return max(0, self.limit - self.count)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_id": self.user_id,
            "limit": self.limit,
            "count": self.count,
            "remaining": self.remaining,
            "has_limit": self.has_limit,
            "at_limit": self.at_limit,
            "at_or_over_limit": self.at_or_over_limit,
        }


def parse_post_limit(raw: Optional[str]) -> Optional[int]:
    """
    Parse a submitted post limit.

    Accepts surrounding whitespace and an optional sign; rejects blanks,
    leading zeros, fractions and negative values.

    Returns:
        The limit, or None if the input is not a valid limit
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not _INTEGER_PATTERN.match(text):
        return None
    value = int(text)
    if value < 0:
        return None
    return value


def coerce_stored_limit(value: Any, user_id: Optional[str] = None) -> int:
    """
    Read a stored post limit. Unset means unlimited (0).

    Anything that is not a non-negative integer is treated as unlimited.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        logger.warning(f"Ignoring non-integer post limit for {user_id}: {value!r}")
        return 0
    if isinstance(value, int):
        limit = value
    else:
        limit = parse_post_limit(value)
        if limit is None:
            logger.warning(f"Ignoring malformed post limit for {user_id}: {value!r}")
            return 0
    if limit < 0:
        logger.warning(f"Ignoring negative post limit for {user_id}: {limit}")
        return 0
    return limit
