"""
TrackedChange model class for representing tracked changes in Word documents.

Instances are plain values: they carry the change text, its author and date,
the 1-indexed paragraph it belongs to and the full paragraph text on either
side, which is later narrowed down to a unique context window.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChangeType(Enum):
    """Types of tracked changes in Word documents.

    Attributes:
        INSERTION: Text that was added (w:ins)
        DELETION: Text that was removed (w:del)
    """

    INSERTION = "insertion"
    DELETION = "deletion"


def parse_ooxml_date(date_str: str | None) -> datetime | None:
    """Parse a w:date attribute value.

    OOXML uses ISO 8601, normally with a trailing "Z".

    Returns:
        datetime object or None if absent or unparseable
    """
    if not date_str:
        return None
    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class TrackedChange:
    """Represents a single tracked change in a Word document.

    Attributes:
        change_type: Insertion or deletion
        author: Author who made the change ("Unknown" if not recorded)
        date: Timestamp when the change was made, if recorded
        text: The inserted or deleted text
        paragraph_number: 1-indexed number of the containing paragraph
        context_before: All paragraph text preceding the change
        context_after: All paragraph text following the change

    Example:
        >>> changes, _ = extract_tracked_changes(document_xml)
        >>> for change in changes:
        ...     print(f"{change.paragraph_number}: {change.change_type.value} {change.text!r}")
    """

    change_type: ChangeType
    author: str
    date: datetime | None
    text: str
    paragraph_number: int
    context_before: str = ""
    context_after: str = ""

    @property
    def is_insertion(self) -> bool:
        """Check if this is an insertion change."""
        return self.change_type is ChangeType.INSERTION

    @property
    def is_deletion(self) -> bool:
        """Check if this is a deletion change."""
        return self.change_type is ChangeType.DELETION

    def __repr__(self) -> str:
        """String representation of the tracked change."""
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return (
            f"<TrackedChange para={self.paragraph_number} type={self.change_type.value} "
            f"author={self.author!r}: {text_preview!r}>"
        )
