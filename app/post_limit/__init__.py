"""
Post limit module: per-user caps on how many items of a content type a user may author.
"""

from .models import QuotaSnapshot, parse_post_limit
from .enforcer import QuotaEnforcer

__all__ = ["QuotaSnapshot", "QuotaEnforcer", "parse_post_limit"]
