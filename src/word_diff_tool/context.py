"""
Minimal unique context windows for changes and comments.

A reviewer reading the git-style report has no character offsets to go by, so
each change or comment is quoted with just enough surrounding text to be found
with a plain text search. Windows start small and grow on the shorter side
until the quoted string occurs once in the document, or until they hit their
maximum length. Non-unique context at that point is accepted as best effort.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    CHANGE_CONTEXT_MAX,
    CHANGE_CONTEXT_MIN,
    COMMENT_CONTEXT_MAX,
    CONTEXT_STEP,
    CURSOR_MARKER,
    ELLIPSIS,
    EMPTY_PARAGRAPH_MARKER,
    POINT_CONTEXT_MAX,
    POINT_CONTEXT_MIN,
)
from .models.comment import Comment
from .models.tracked_change import TrackedChange


@dataclass(frozen=True)
class ContextWindow:
    """The chosen context on each side of an anchor.

    Attributes:
        before: Trimmed text before the anchor, prefixed with "..." if truncated
        after: Trimmed text after the anchor, suffixed with "..." if truncated
        before_length: Characters of raw context taken before the anchor
        after_length: Characters of raw context taken after the anchor
    """

    before: str
    after: str
    before_length: int
    after_length: int


def count_occurrences(needle: str, haystack: str) -> int:
    """Count occurrences of ``needle``, overlapping matches included.

    Example:
        >>> count_occurrences("aa", "aaaa")
        3
    """
    if not needle:
        return 0
    count = 0
    pos = haystack.find(needle)
    while pos != -1:
        count += 1
        pos = haystack.find(needle, pos + 1)
    return count


def _tail(text: str, length: int) -> str:
    return text[len(text) - length :]


def find_unique_context(
    before: str,
    after: str,
    full_text: str,
    anchor: str = "",
    min_length: int = CHANGE_CONTEXT_MIN,
    max_length: int = CHANGE_CONTEXT_MAX,
    step: int = CONTEXT_STEP,
) -> ContextWindow:
    """Grow a window around ``anchor`` until it is unique in ``full_text``.

    Args:
        before: All available text before the anchor
        after: All available text after the anchor
        full_text: Text to test uniqueness against
        anchor: Text between the two sides; empty for a cursor position
        min_length: Starting length of each side
        max_length: Maximum length of each side
        step: Characters added per expansion

    Returns:
        The chosen window. The shorter side grows first, "before" on ties.
    """
    before_limit = min(len(before), max_length)
    after_limit = min(len(after), max_length)
    before_length = min(min_length, before_limit)
    after_length = min(min_length, after_limit)

    while True:
        candidate = _tail(before, before_length) + anchor + after[:after_length]
        if count_occurrences(candidate, full_text) <= 1:
            break

        can_grow_before = before_length < before_limit
        can_grow_after = after_length < after_limit
        if can_grow_before and (before_length <= after_length or not can_grow_after):
            before_length = min(before_length + step, before_limit)
        elif can_grow_after:
            after_length = min(after_length + step, after_limit)
        else:
            break

    shown_before = _tail(before, before_length).strip()
    shown_after = after[:after_length].strip()
    if before_length < len(before) and shown_before:
        shown_before = ELLIPSIS + shown_before
    if after_length < len(after) and shown_after:
        shown_after = shown_after + ELLIPSIS

    return ContextWindow(
        before=shown_before,
        after=shown_after,
        before_length=before_length,
        after_length=after_length,
    )


def change_context(
    change: TrackedChange,
    full_text: str,
    min_length: int = CHANGE_CONTEXT_MIN,
    max_length: int = CHANGE_CONTEXT_MAX,
) -> tuple[str, str]:
    """Find the unique (before, after) context for a tracked change."""
    window = find_unique_context(
        change.context_before,
        change.context_after,
        full_text,
        anchor=change.text,
        min_length=min_length,
        max_length=max_length,
    )
    return window.before, window.after


def point_context(
    before: str,
    after: str,
    full_text: str,
    min_length: int = POINT_CONTEXT_MIN,
    max_length: int = POINT_CONTEXT_MAX,
) -> str:
    """Render the context of a cursor position with ">|<" at the cursor.

    Example:
        >>> point_context("Hello ", "world", "Hello world")
        'Hello>|<world'
    """
    window = find_unique_context(
        before, after, full_text, min_length=min_length, max_length=max_length
    )
    if window.before or window.after:
        return f"{window.before}{CURSOR_MARKER}{window.after}"
    return EMPTY_PARAGRAPH_MARKER


def comment_context(
    comment: Comment,
    full_text: str,
    max_length: int = COMMENT_CONTEXT_MAX,
) -> str:
    """Render the unique context of a comment.

    The selected text is always shown in full inside brackets; only the
    surrounding context is expanded or truncated. Point comments are rendered
    by :func:`point_context`.
    """
    if comment.is_point:
        return point_context(comment.context_before, comment.context_after, full_text)

    window = find_unique_context(
        comment.context_before,
        comment.context_after,
        full_text,
        anchor=comment.anchored_text,
        min_length=0,
        max_length=max_length,
    )
    parts = [window.before, f"[{comment.anchored_text}]", window.after]
    return " ".join(part for part in parts if part)
