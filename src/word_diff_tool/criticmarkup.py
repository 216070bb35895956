"""CriticMarkup insertion/deletion codec for plain text files.

This module provides:
1. Applying CriticMarkup: resolving the markup to the edited text
2. Generating CriticMarkup from two versions of a text
3. Rendering structured paragraph spans as CriticMarkup

Syntax handled:
    - Insertion: {++inserted text++}
    - Deletion: {--deleted text--}

See: http://criticmarkup.com/
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from diff_match_patch import diff_match_patch

from .constants import DELETION_CLOSE, DELETION_OPEN, INSERTION_CLOSE, INSERTION_OPEN
from .models.span import Span, SpanType

logger = logging.getLogger(__name__)

# Non-greedy and spanning newlines. Unlike a parser for authored markup, empty
# bodies ("{++++}") are accepted.
_INSERTION_PATTERN = re.compile(r"\{\+\+(.*?)\+\+\}", re.DOTALL)
_DELETION_PATTERN = re.compile(r"\{--(.*?)--\}", re.DOTALL)

# Literal text and change bodies that would read as delimiters when applied.
# A literal "{" is followed by an empty insertion, which resolves to nothing.
# Change bodies are split into several adjacent changes instead.
_LITERAL_OPENING = re.compile(r"\{(?=\+\+|--)")
_TRAILING_BRACE = re.compile(r"\{(?=\+?\Z)")
_INSERTION_BREAKS = re.compile(r"(?<=\+\+)(?=\})|(?<=\{-)(?=-)")
_DELETION_BREAKS = re.compile(r"(?<=--)(?=\})")
_ESCAPED_BRACE = "{" + INSERTION_OPEN + INSERTION_CLOSE


def insertion(text: str) -> str:
    return f"{INSERTION_OPEN}{text}{INSERTION_CLOSE}"


def deletion(text: str) -> str:
    return f"{DELETION_OPEN}{text}{DELETION_CLOSE}"


def apply_markup(text: str) -> str:
    """Resolve CriticMarkup, producing the edited text.

    Deletions are removed together with their content first; insertions are
    then replaced by their content.

    Args:
        text: Text potentially containing CriticMarkup

    Returns:
        Clean text with all insertions and deletions applied

    Example:
        >>> apply_markup("This {--is--}{++was++} a test {++document++}.")
        'This was a test document.'
    """
    result = _DELETION_PATTERN.sub("", text)
    return _INSERTION_PATTERN.sub(r"\1", result)


def generate_markup(old_text: str, new_text: str) -> str:
    """Describe the edit from ``old_text`` to ``new_text`` as CriticMarkup.

    The character diff is coalesced with diff-match-patch's semantic cleanup so
    that edits read as whole words or phrases rather than scattered characters.
    Text that already contains delimiter sequences is escaped so the result
    still applies back to ``new_text``.

    Args:
        old_text: Original text
        new_text: Edited text

    Returns:
        Text where ``apply_markup(result) == new_text``

    Example:
        >>> generate_markup("The cat sat.", "The dog sat.")
        'The {--cat--}{++dog++} sat.'
    """
    dmp = diff_match_patch()
    diffs = dmp.diff_main(old_text, new_text)
    dmp.diff_cleanupSemantic(diffs)

    parts: list[str] = []
    for index, (operation, text) in enumerate(diffs):
        if operation == dmp.DIFF_EQUAL:
            parts.append(_escape_literal(text, last=index == len(diffs) - 1))
        elif operation == dmp.DIFF_INSERT:
            parts.extend(insertion(piece) for piece in _INSERTION_BREAKS.split(text))
        elif operation == dmp.DIFF_DELETE:
            parts.extend(deletion(piece) for piece in _DELETION_BREAKS.split(text))
    return "".join(parts)


def _escape_literal(text: str, last: bool) -> str:
    """Keep unchanged text from being read as markup by ``apply_markup``.

    A "{" at the end of a segment is escaped unless the segment ends the
    output, because removing a following deletion can join it to "++".
    """
    text = _LITERAL_OPENING.sub(_ESCAPED_BRACE, text)
    if not last:
        text = _TRAILING_BRACE.sub(_ESCAPED_BRACE, text)
    return text


def render_spans(spans: Iterable[Span]) -> str:
    """Render paragraph spans as CriticMarkup text.

    Example:
        >>> render_spans([Span(SpanType.PLAIN, "a "), Span(SpanType.INSERTED, "new")])
        'a {++new++}'
    """
    parts: list[str] = []
    for span in spans:
        if span.type is SpanType.INSERTED:
            parts.append(insertion(span.content))
        elif span.type is SpanType.DELETED:
            parts.append(deletion(span.content))
        else:
            parts.append(span.content)
    return "".join(parts)


def apply_markup_file(path: str | Path, output_path: str | Path | None = None) -> str:
    """Apply the CriticMarkup in a file.

    Args:
        path: File containing CriticMarkup
        output_path: Where to write the cleaned text, if anywhere

    Returns:
        The cleaned text
    """
    content = Path(path).read_text(encoding="utf-8")
    result = apply_markup(content)

    if output_path is not None:
        Path(output_path).write_text(result, encoding="utf-8")
        logger.debug("Wrote cleaned text to %s", output_path)
    return result


def diff_markup_files(
    first_path: str | Path,
    second_path: str | Path,
    output_path: str | Path | None = None,
) -> str:
    """Generate CriticMarkup describing the edit from one file to another.

    Markup already present in either file is applied first, so the diff is
    always taken between clean texts.

    Args:
        first_path: The original file
        second_path: The edited file
        output_path: Where to write the diff, if anywhere

    Returns:
        The CriticMarkup diff
    """
    first = apply_markup(Path(first_path).read_text(encoding="utf-8"))
    second = apply_markup(Path(second_path).read_text(encoding="utf-8"))
    result = generate_markup(first, second)

    if output_path is not None:
        Path(output_path).write_text(result, encoding="utf-8")
        logger.debug("Wrote diff to %s", output_path)
    return result
