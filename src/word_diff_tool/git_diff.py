"""
Git-style review diff for Word documents with tracked changes and comments.

This module builds a ``DiffOutput`` for a document and renders it either as an
annotated, diff-like text report or as a JSON/YAML tree carrying the same
fields.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO

import yaml

from .comments import extract_comments
from .constants import CHANGE_GAP_MARKER, DOCUMENT_PART, NEWLINE_PLACEHOLDER
from .context import change_context, comment_context
from .models.comment import Comment
from .models.tracked_change import TrackedChange
from .package import OOXMLPackage
from .paragraphs import extract_tracked_changes

logger = logging.getLogger(__name__)

FORMAT_HEADER = """# Word Document Diff (Modified Format)
# =====================================
# This is a modified diff format for Word documents with tracked changes.
#
# Format:
#   +line = added text
#   -line = deleted text
#   > [author]: comment text (interspersed with changes in document order)
#   @@ paragraph N @@ = paragraph number where changes occur
#
# Context (after #):
#   "before [...] after" = surrounding text with [...] marking where the change occurs
#   "before [selected] after" = for comments, [brackets] mark the commented text
#   "before>|<after" = for point comments (no selection), >|< marks cursor position
#   ... = truncated text
#   Context auto-expands until unique in the document
#
# Special characters:
#   ␊ = newline (for multiline comments or selections)
#
"""


@dataclass(frozen=True)
class DiffOutput:
    """Everything needed to render a review diff for one document.

    Attributes:
        filename: Base name of the source document
        changes: Tracked changes in document order
        comments: Comments sorted by paragraph
        full_text: Paragraph texts joined by newlines, for uniqueness checks
    """

    filename: str
    changes: tuple[TrackedChange, ...]
    comments: tuple[Comment, ...]
    full_text: str


def build_diff_output(
    filename: str,
    document_xml: str,
    comments: list[Comment] | tuple[Comment, ...] = (),
) -> DiffOutput:
    """Build a DiffOutput from already-read document XML and comments."""
    changes, full_text = extract_tracked_changes(document_xml)
    return DiffOutput(
        filename=filename,
        changes=tuple(changes),
        comments=tuple(comments),
        full_text=full_text,
    )


def generate_git_diff(source: str | Path | BinaryIO, filename: str | None = None) -> DiffOutput:
    """Read a Word document and collect its tracked changes and comments.

    Args:
        source: Path to the .docx file or a binary stream containing it
        filename: Name to show in the report; defaults to the file's base name

    Returns:
        The document's DiffOutput

    Raises:
        DocumentNotFoundError: If the path does not exist
        InvalidDocumentError: If the file is not a .docx package
        MissingPartError: If the package has no word/document.xml
    """
    with OOXMLPackage.open(source) as package:
        if filename is None:
            filename = package.source_path.name if package.source_path else "document.docx"
        document_xml = package.read_text(DOCUMENT_PART)
        comments = extract_comments(package, document_xml)

    logger.debug("Document XML size: %d characters", len(document_xml))
    return build_diff_output(filename, document_xml, comments)


def escape_newlines(text: str) -> str:
    """Replace line breaks with a visible placeholder so output stays single-line."""
    return (
        text.replace("\r\n", NEWLINE_PLACEHOLDER)
        .replace("\n", NEWLINE_PLACEHOLDER)
        .replace("\r", NEWLINE_PLACEHOLDER)
    )


def format_context_quote(before: str, after: str) -> str:
    """Format the trailing ``  # "before [...] after"`` quote of a change line."""
    parts = [part for part in (before, after) if part]
    if not parts:
        return ""
    return f'  # "{escape_newlines(CHANGE_GAP_MARKER.join(parts))}"'


def _ordered_items(output: DiffOutput) -> list[TrackedChange | Comment]:
    items: list[TrackedChange | Comment] = [*output.changes, *output.comments]
    # Stable: document order is kept within each (paragraph, kind) bucket
    items.sort(key=lambda item: (item.paragraph_number, isinstance(item, Comment)))
    return items


def _format_change(change: TrackedChange, full_text: str) -> str:
    before, after = change_context(change, full_text)
    sign = "+" if change.is_insertion else "-"
    return f"{sign}{escape_newlines(change.text)}{format_context_quote(before, after)}"


def _format_comment(comment: Comment, full_text: str) -> str:
    context = escape_newlines(comment_context(comment, full_text))
    return f'> [{comment.author}]: {escape_newlines(comment.text)}  # "{context}"'


def format_as_git_diff(output: DiffOutput) -> str:
    """Format a DiffOutput as a git-style unified diff.

    Changes and comments are grouped under ``@@ paragraph N @@`` markers in
    ascending paragraph order, changes before comments within a paragraph.

    Example:
        >>> print(format_as_git_diff(generate_git_diff("review.docx")))
    """
    lines = [
        FORMAT_HEADER,
        f"diff --word a/{output.filename} b/{output.filename}",
        f"--- a/{output.filename}",
        f"+++ b/{output.filename}",
    ]

    current_paragraph: int | None = None
    for item in _ordered_items(output):
        if item.paragraph_number != current_paragraph:
            current_paragraph = item.paragraph_number
            lines.append(f"@@ paragraph {current_paragraph} @@")

        if isinstance(item, Comment):
            lines.append(_format_comment(item, output.full_text))
        else:
            lines.append(_format_change(item, output.full_text))

    return "\n".join(lines)


def _date_to_str(date: datetime | None) -> str | None:
    return date.isoformat() if date else None


def _change_to_dict(change: TrackedChange) -> dict[str, Any]:
    return {
        "type": change.change_type.value,
        "author": change.author,
        "date": _date_to_str(change.date),
        "text": change.text,
        "paragraph_number": change.paragraph_number,
        "context_before": change.context_before,
        "context_after": change.context_after,
    }


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "author": comment.author,
        "date": _date_to_str(comment.date),
        "text": comment.text,
        "anchored_text": comment.anchored_text,
        "context_before": comment.context_before,
        "context_after": comment.context_after,
        "paragraph_number": comment.paragraph_number,
    }


def to_dict(output: DiffOutput) -> dict[str, Any]:
    """Convert a DiffOutput to plain dicts and lists for serialization."""
    return {
        "filename": output.filename,
        "changes": [_change_to_dict(change) for change in output.changes],
        "comments": [_comment_to_dict(comment) for comment in output.comments],
        "full_text": output.full_text,
    }


def format_as_json(output: DiffOutput, indent: int | None = 2) -> str:
    """Serialize a DiffOutput as JSON.

    Args:
        output: The diff output
        indent: JSON indentation level, or None for compact output
    """
    return json.dumps(to_dict(output), indent=indent, ensure_ascii=False)


def format_as_yaml(output: DiffOutput) -> str:
    """Serialize a DiffOutput as YAML, keeping field order."""
    return yaml.safe_dump(
        to_dict(output), sort_keys=False, allow_unicode=True, default_flow_style=False
    )
