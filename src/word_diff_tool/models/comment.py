"""
Comment model for Word document comments.

A Comment joins two independently parsed structures by comment id: the body
from ``word/comments.xml`` and the anchor (range markers) from
``word/document.xml``.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Comment:
    """A reviewer comment and the document text it is attached to.

    Attributes:
        id: The comment ID (w:id attribute value)
        author: Author name, or empty string if not set
        date: Comment date/time, if recorded
        text: Comment body; multiple body paragraphs are joined by newlines
        anchored_text: The selected text; empty for point comments
        context_before: Paragraph text before the selection or cursor
        context_after: Paragraph text after the selection or cursor
        paragraph_number: 1-indexed paragraph of the anchor, 0 when unanchored

    Example:
        >>> for comment in comments:
        ...     print(f"{comment.author}: {comment.text}")
        ...     if comment.anchored_text:
        ...         print(f"  On: '{comment.anchored_text}'")
    """

    id: str
    author: str
    date: datetime | None
    text: str
    anchored_text: str = ""
    context_before: str = ""
    context_after: str = ""
    paragraph_number: int = 0

    @property
    def is_point(self) -> bool:
        """Check if this comment marks a position rather than a selection."""
        return not self.anchored_text

    @property
    def is_anchored(self) -> bool:
        """Check if this comment could be located in the document body."""
        return self.paragraph_number > 0

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return (
            f"<Comment id={self.id} para={self.paragraph_number} "
            f"author={self.author!r}: {text_preview!r}>"
        )
