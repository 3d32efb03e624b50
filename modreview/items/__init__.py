"""
Content items under review.
"""
from modreview.items.models import (
    ContentItem,
    Priority,
    ReviewStatus,
    ReviewDecision,
    format_display_id,
)
from modreview.items.demo import demo_items

__all__ = [
    "ContentItem",
    "Priority",
    "ReviewStatus",
    "ReviewDecision",
    "format_display_id",
    "demo_items",
]
