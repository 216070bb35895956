"""
word_diff_tool - Review Word tracked changes and comments as plain-text diffs.

This package reads the tracked insertions, deletions and comments of a .docx
file and renders them either as markdown with CriticMarkup or as a git-style
diff whose every entry is quoted with just enough context to be found again.
It also generates and applies CriticMarkup between two markdown files.

Example:
    >>> from word_diff_tool import generate_git_diff, format_as_git_diff
    >>> print(format_as_git_diff(generate_git_diff("contract.docx")))
"""

__version__ = "0.1.0"
__all__ = [
    "ChangeType",
    "Comment",
    "DiffOutput",
    "DocumentNotFoundError",
    "InvalidDocumentError",
    "MissingPartError",
    "OOXMLPackage",
    "Span",
    "SpanType",
    "TrackedChange",
    "WordDiffError",
    "apply_markup",
    "convert_document",
    "extract_comments",
    "extract_tracked_changes",
    "format_as_git_diff",
    "format_as_json",
    "format_as_yaml",
    "generate_git_diff",
    "generate_markup",
    "structure_paragraph",
]

from .comments import extract_comments
from .criticmarkup import apply_markup, generate_markup
from .errors import DocumentNotFoundError, InvalidDocumentError, MissingPartError, WordDiffError
from .git_diff import (
    DiffOutput,
    format_as_git_diff,
    format_as_json,
    format_as_yaml,
    generate_git_diff,
)
from .models import ChangeType, Comment, Span, SpanType, TrackedChange
from .package import OOXMLPackage
from .paragraphs import extract_tracked_changes, structure_paragraph
from .processor import convert_document
