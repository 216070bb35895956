"""
Span model for the editorial status of a stretch of paragraph text.
"""

from dataclasses import dataclass
from enum import Enum


class SpanType(Enum):
    """Editorial status of a span.

    Attributes:
        PLAIN: Text that is part of the document without pending changes
        INSERTED: Text added with change tracking on (w:ins)
        DELETED: Text removed with change tracking on (w:del)
    """

    PLAIN = "plain"
    INSERTED = "inserted"
    DELETED = "deleted"


@dataclass(frozen=True)
class Span:
    """A contiguous run of paragraph text tagged with its status."""

    type: SpanType
    content: str

    @property
    def is_change(self) -> bool:
        """Check if this span is an insertion or deletion."""
        return self.type is not SpanType.PLAIN

    def __repr__(self) -> str:
        return f"<Span {self.type.value}: {self.content!r}>"
