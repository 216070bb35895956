"""
Conversion of Word documents with tracked changes into CriticMarkup markdown.

Each non-empty paragraph becomes one markdown block in which insertions and
deletions appear as ``{++...++}`` and ``{--...--}``. A few coarse heuristics
add markdown formatting: short all-caps paragraphs become headings, bare URLs
and e-mail addresses become autolinks, and runs of capitalised words are made
bold.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import BinaryIO

from .constants import DOCUMENT_PART
from .criticmarkup import render_spans
from .package import OOXMLPackage
from .paragraphs import find_paragraphs, structure_paragraph

logger = logging.getLogger(__name__)

HEADING_MAX_LENGTH = 100

# Bare URLs and addresses; ones already inside a link or autolink are skipped
_URL_PATTERN = re.compile(r"(?<![(<])\b(?:https?|ftp)://[^\s]+\b")
_EMAIL_PATTERN = re.compile(r"(?<![:<])\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")
_BOLD_PATTERN = re.compile(r"(?<!\*)\b[A-Z][A-Z0-9\s]{2,}[A-Z0-9]\b(?!\*)")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def is_heading(text: str) -> bool:
    """Check whether a paragraph looks like an all-caps heading."""
    stripped = text.strip()
    return (
        bool(stripped)
        and len(text) < HEADING_MAX_LENGTH
        and text.upper() == text
        and any(char.isalpha() for char in stripped)
        and not text.startswith("#")
    )


def format_paragraph_as_markdown(text: str) -> str:
    """Apply the markdown heuristics to one rendered paragraph.

    Example:
        >>> format_paragraph_as_markdown("INTRODUCTION")
        '## INTRODUCTION'
        >>> format_paragraph_as_markdown("Mail bob@example.com")
        'Mail <bob@example.com>'
    """
    if is_heading(text):
        return f"## {text}"

    text = _URL_PATTERN.sub(lambda match: f"<{match.group(0)}>", text)
    text = _EMAIL_PATTERN.sub(lambda match: f"<{match.group(0)}>", text)
    return _BOLD_PATTERN.sub(lambda match: f"**{match.group(0)}**", text)


def convert_paragraphs(xml: str, use_highlights: bool = False) -> list[str]:
    """Render every non-empty paragraph of the document XML as markdown."""
    blocks: list[str] = []
    for paragraph in find_paragraphs(xml):
        rendered = render_spans(structure_paragraph(paragraph.content, use_highlights))
        if rendered.strip():
            blocks.append(format_paragraph_as_markdown(rendered))
    logger.debug("Converted %d non-empty paragraphs", len(blocks))
    return blocks


def convert_docx_xml_to_markdown(
    xml: str,
    use_highlights: bool = False,
    filename: str = "document.docx",
) -> str:
    """Convert ``word/document.xml`` content to a markdown document.

    Args:
        xml: Contents of ``word/document.xml``
        use_highlights: Treat green/red highlighted runs as insertions/deletions
        filename: Source file name; its stem becomes the document title

    Returns:
        Markdown with a ``# <title>`` line and one block per paragraph
    """
    logger.debug("Document XML size: %d characters", len(xml))

    markdown = f"# {Path(filename).stem}\n\n"
    for block in convert_paragraphs(xml, use_highlights):
        markdown += block + "\n\n"

    return _EXCESS_NEWLINES.sub("\n\n", markdown)


def convert_document(
    source: str | Path | BinaryIO,
    use_highlights: bool = False,
    filename: str | None = None,
) -> str:
    """Convert a Word document with tracked changes to CriticMarkup markdown.

    Args:
        source: Path to the .docx file or a binary stream containing it
        use_highlights: Treat green/red highlighted runs as insertions/deletions
        filename: Name used for the title; defaults to the file's name

    Returns:
        The markdown document

    Raises:
        DocumentNotFoundError: If the path does not exist
        InvalidDocumentError: If the file is not a .docx package
        MissingPartError: If the package has no word/document.xml

    Example:
        >>> markdown = convert_document("contract.docx", use_highlights=True)
    """
    with OOXMLPackage.open(source) as package:
        if filename is None:
            filename = package.source_path.name if package.source_path else "document.docx"
        xml = package.read_text(DOCUMENT_PART)

    return convert_docx_xml_to_markdown(xml, use_highlights, filename)
