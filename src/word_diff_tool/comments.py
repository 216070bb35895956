"""
Comment extraction and anchoring.

Comment bodies live in ``word/comments.xml`` and are read with lxml. Their
anchors live in ``word/document.xml`` as pairs of w:commentRangeStart /
w:commentRangeEnd markers carrying the comment id. The two are joined by id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lxml import etree

from .constants import (
    COMMENT_RANGE_END_TAG,
    COMMENT_RANGE_START_TAG,
    COMMENT_REFERENCE_TAG,
    COMMENTS_PART,
    DOCUMENT_PART,
    WORD_NAMESPACE,
)
from .errors import InvalidDocumentError
from .models.comment import Comment
from .models.tracked_change import parse_ooxml_date
from .package import OOXMLPackage
from .paragraphs import Paragraph, find_paragraphs
from .xml_scan import Tag, TagKind, extract_all_text, iter_tags

logger = logging.getLogger(__name__)

_W = f"{{{WORD_NAMESPACE}}}"


@dataclass(frozen=True)
class CommentBody:
    """A w:comment element from the comments part."""

    id: str
    author: str
    date_text: str | None
    text: str


@dataclass(frozen=True)
class CommentAnchor:
    """Where a comment sits in the document body."""

    paragraph_number: int
    anchored_text: str
    context_before: str
    context_after: str


def parse_comment_bodies(comments_xml: str | bytes | etree._Element) -> list[CommentBody]:
    """Read every w:comment in the comments part.

    Args:
        comments_xml: The comments part as text, bytes or a parsed element

    Returns:
        Comment bodies in the order they appear. Each body paragraph becomes
        one line of the comment text.

    Raises:
        InvalidDocumentError: If the XML cannot be parsed
    """
    if isinstance(comments_xml, etree._Element):
        root = comments_xml
    else:
        data = comments_xml.encode("utf-8") if isinstance(comments_xml, str) else comments_xml
        try:
            root = etree.fromstring(data)
        except etree.XMLSyntaxError as e:
            raise InvalidDocumentError(f"Could not parse {COMMENTS_PART}: {e}") from e

    bodies: list[CommentBody] = []
    for element in root.iter(f"{_W}comment"):
        paragraphs = element.findall(f"{_W}p")
        if paragraphs:
            text = "\n".join(
                "".join(t.text or "" for t in para.iter(f"{_W}t")) for para in paragraphs
            )
        else:
            text = "".join(t.text or "" for t in element.iter(f"{_W}t"))

        bodies.append(
            CommentBody(
                id=element.get(f"{_W}id", ""),
                author=element.get(f"{_W}author", ""),
                date_text=element.get(f"{_W}date"),
                text=text,
            )
        )
    return bodies


def _enclosing_paragraph(paragraphs: list[Paragraph], offset: int) -> Paragraph | None:
    """Find the paragraph containing an offset, or the one starting closest to it."""
    for paragraph in paragraphs:
        if paragraph.contains(offset):
            return paragraph
    if not paragraphs:
        return None
    return min(paragraphs, key=lambda paragraph: abs(paragraph.start - offset))


def _find_marker(xml: str, tag_name: str, comment_id: str, pos: int) -> Tag | None:
    for tag in iter_tags(xml, (tag_name,), pos):
        if tag.kind is not TagKind.CLOSE and tag.attrs.get("w:id") == comment_id:
            return tag
    return None


def _range_text(xml: str, paragraphs: list[Paragraph], start: int, end: int) -> str:
    """Text between two document offsets, with a newline at each paragraph break."""
    pieces: list[str] = []
    for paragraph in paragraphs:
        if paragraph.end <= start or paragraph.start >= end:
            continue
        piece_start = max(start, paragraph.content_start)
        piece_end = min(end, paragraph.end)
        pieces.append(extract_all_text(xml[piece_start:piece_end]))
    if not pieces:
        return extract_all_text(xml[start:end])
    return "\n".join(pieces)


def find_comment_anchors(document_xml: str) -> dict[str, CommentAnchor]:
    """Locate the anchor of every comment in the document body.

    Ranged comments are resolved from their start/end markers. A comment with
    no range markers but with a w:commentReference is anchored as a point
    comment at the reference. Ranges whose end marker is missing are skipped.

    Args:
        document_xml: Contents of ``word/document.xml``

    Returns:
        Mapping of comment id to its anchor
    """
    paragraphs = find_paragraphs(document_xml)
    anchors: dict[str, CommentAnchor] = {}

    for start_tag in iter_tags(document_xml, (COMMENT_RANGE_START_TAG,)):
        comment_id = start_tag.attrs.get("w:id")
        if start_tag.kind is TagKind.CLOSE or comment_id is None or comment_id in anchors:
            continue

        end_tag = _find_marker(document_xml, COMMENT_RANGE_END_TAG, comment_id, start_tag.end)
        if end_tag is None:
            logger.debug("Comment %s has no range end marker; skipping", comment_id)
            continue

        start_paragraph = _enclosing_paragraph(paragraphs, start_tag.start)
        if start_paragraph is None:
            continue
        end_paragraph = _enclosing_paragraph(paragraphs, end_tag.start) or start_paragraph

        anchors[comment_id] = CommentAnchor(
            paragraph_number=start_paragraph.number,
            anchored_text=_range_text(document_xml, paragraphs, start_tag.end, end_tag.start),
            context_before=extract_all_text(
                document_xml[start_paragraph.content_start : start_tag.start]
            ),
            context_after=extract_all_text(document_xml[end_tag.end : end_paragraph.end]),
        )

    for reference in iter_tags(document_xml, (COMMENT_REFERENCE_TAG,)):
        comment_id = reference.attrs.get("w:id")
        if reference.kind is TagKind.CLOSE or comment_id is None or comment_id in anchors:
            continue

        paragraph = _enclosing_paragraph(paragraphs, reference.start)
        if paragraph is None:
            continue

        anchors[comment_id] = CommentAnchor(
            paragraph_number=paragraph.number,
            anchored_text="",
            context_before=extract_all_text(
                document_xml[paragraph.content_start : reference.start]
            ),
            context_after=extract_all_text(document_xml[reference.end : paragraph.end]),
        )

    return anchors


def resolve_comments(document_xml: str, bodies: list[CommentBody]) -> list[Comment]:
    """Join comment bodies with their anchors.

    A body without an anchor is kept with empty anchor fields and paragraph
    number 0. Anchors without a body are ignored.

    Args:
        document_xml: Contents of ``word/document.xml``
        bodies: Parsed comment bodies

    Returns:
        Comments sorted by paragraph number; ties keep body order
    """
    anchors = find_comment_anchors(document_xml)
    comments: list[Comment] = []

    for body in bodies:
        anchor = anchors.get(body.id)
        if anchor is None:
            logger.debug("Comment %s is not anchored in the document body", body.id)
            comments.append(
                Comment(
                    id=body.id,
                    author=body.author,
                    date=parse_ooxml_date(body.date_text),
                    text=body.text,
                )
            )
            continue

        comments.append(
            Comment(
                id=body.id,
                author=body.author,
                date=parse_ooxml_date(body.date_text),
                text=body.text,
                anchored_text=anchor.anchored_text,
                context_before=anchor.context_before,
                context_after=anchor.context_after,
                paragraph_number=anchor.paragraph_number,
            )
        )

    comments.sort(key=lambda comment: comment.paragraph_number)
    return comments


def extract_comments(package: OOXMLPackage, document_xml: str | None = None) -> list[Comment]:
    """Extract all comments from an open document package.

    Args:
        package: The open package
        document_xml: Contents of ``word/document.xml`` if already read

    Returns:
        Resolved comments, or an empty list when the package has no comments part
    """
    root = package.get_part(COMMENTS_PART)
    if root is None:
        return []

    if document_xml is None:
        document_xml = package.read_text(DOCUMENT_PART)

    comments = resolve_comments(document_xml, parse_comment_bodies(root))
    logger.debug("Found %d comments", len(comments))
    return comments
