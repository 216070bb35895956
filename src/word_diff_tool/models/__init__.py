"""
Value objects produced by the extraction pipeline.
"""

from .comment import Comment
from .span import Span, SpanType
from .tracked_change import ChangeType, TrackedChange, parse_ooxml_date

__all__ = [
    "ChangeType",
    "Comment",
    "Span",
    "SpanType",
    "TrackedChange",
    "parse_ooxml_date",
]
