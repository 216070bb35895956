"""
Paragraph structure and tracked-change extraction for ``word/document.xml``.

A paragraph's content is walked left to right with a cursor. At each step the
next plain run (w:r), insertion (w:ins) and deletion (w:del) start tags are
located and the earliest one is consumed as a whole element. Runs that sit
inside an insertion or deletion belong to that wrapper and are not read twice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .constants import (
    DELETED_TEXT_TAG,
    DELETION_HIGHLIGHTS,
    DELETION_SHADING_FILLS,
    DELETION_TAG,
    HIGHLIGHT_TAG,
    INSERTION_HIGHLIGHTS,
    INSERTION_SHADING_FILLS,
    INSERTION_TAG,
    PARAGRAPH_TAG,
    RUN_TAG,
    SHADING_TAG,
    TEXT_TAG,
    UNKNOWN_AUTHOR,
)
from .models.span import Span, SpanType
from .models.tracked_change import ChangeType, TrackedChange, parse_ooxml_date
from .xml_scan import (
    Element,
    Tag,
    TagKind,
    element_at,
    extract_all_text,
    extract_text,
    find_elements,
    find_opening_tag,
    has_element,
    iter_tags,
)

logger = logging.getLogger(__name__)

# Priority order when start tags share an offset
_SPAN_MARKERS = (INSERTION_TAG, DELETION_TAG, RUN_TAG)
_CHANGE_MARKERS = (INSERTION_TAG, DELETION_TAG)


@dataclass(frozen=True)
class Paragraph:
    """A w:p element located in the document body.

    Attributes:
        number: 1-indexed position in the document's paragraph sequence
        start: Offset of the opening tag in the document XML
        end: Offset just past the closing tag
        content_start: Offset of the first character of ``content``
        content: Markup between the opening and closing tags
        text: All text in the paragraph, tracked changes included
    """

    number: int
    start: int
    end: int
    content_start: int
    content: str
    text: str

    def contains(self, offset: int) -> bool:
        """Check whether a document offset lies strictly inside this paragraph."""
        return self.start < offset < self.end


@dataclass
class WrapperDepth:
    """Open-minus-close counters for insertion and deletion wrappers.

    Both counters saturate at zero so a stray closing tag cannot make later
    runs look like they are outside a wrapper they are actually in.
    """

    insertion: int = 0
    deletion: int = 0

    @classmethod
    def of_prefix(cls, xml: str) -> WrapperDepth:
        """Compute the wrapper depth at the end of ``xml``."""
        depth = cls()
        for tag in iter_tags(xml, _CHANGE_MARKERS):
            depth.feed(tag)
        return depth

    def feed(self, tag: Tag) -> None:
        if tag.kind is TagKind.EMPTY:
            return
        delta = 1 if tag.kind is TagKind.OPEN else -1
        if tag.name == INSERTION_TAG:
            self.insertion = max(0, self.insertion + delta)
        elif tag.name == DELETION_TAG:
            self.deletion = max(0, self.deletion + delta)

    @property
    def inside_change(self) -> bool:
        return self.insertion > 0 or self.deletion > 0


def find_paragraphs(xml: str) -> list[Paragraph]:
    """Locate every paragraph in the document XML, in document order."""
    return [
        Paragraph(
            number=number,
            start=element.start,
            end=element.end,
            content_start=element.inner_start,
            content=element.inner,
            text=extract_all_text(element.inner),
        )
        for number, element in enumerate(find_elements(xml, PARAGRAPH_TAG), start=1)
    ]


def extract_inserted_text(xml: str) -> str:
    """Extract the text of an insertion from its w:t leaves."""
    return extract_text(xml, TEXT_TAG)


def extract_deleted_text(xml: str) -> str:
    """Extract the text of a deletion.

    Word stores deleted text in w:delText leaves. Some producers leave it in
    ordinary w:t leaves instead, so those are read when no w:delText exists.
    """
    if has_element(xml, DELETED_TEXT_TAG):
        return extract_text(xml, DELETED_TEXT_TAG)
    return extract_text(xml, TEXT_TAG)


def highlight_type(run_xml: str) -> SpanType:
    """Classify a run by its highlight or shading colour.

    Green marks an insertion and red marks a deletion. A w:highlight value is
    checked before w:shd fill colours.
    """
    highlight = find_opening_tag(run_xml, HIGHLIGHT_TAG)
    if highlight is not None:
        color = highlight.attrs.get("w:val", "").lower()
        if color in INSERTION_HIGHLIGHTS:
            return SpanType.INSERTED
        if color in DELETION_HIGHLIGHTS:
            return SpanType.DELETED

    shading = find_opening_tag(run_xml, SHADING_TAG)
    if shading is not None:
        fill = shading.attrs.get("w:fill", "").lower()
        if fill in INSERTION_SHADING_FILLS:
            return SpanType.INSERTED
        if fill in DELETION_SHADING_FILLS:
            return SpanType.DELETED

    return SpanType.PLAIN


def merge_adjacent_spans(spans: Iterable[Span]) -> list[Span]:
    """Merge neighbouring insertions (or deletions) into a single span.

    Word often splits one edit across several w:ins or w:del elements, for
    instance when formatting changes mid-word. Plain spans are left as they are.

    Example:
        >>> spans = [Span(SpanType.INSERTED, "an "), Span(SpanType.INSERTED, "edit")]
        >>> merge_adjacent_spans(spans)
        [<Span inserted: 'an edit'>]
    """
    merged: list[Span] = []
    for span in spans:
        if merged and span.is_change and merged[-1].type is span.type:
            merged[-1] = Span(span.type, merged[-1].content + span.content)
        else:
            merged.append(span)
    return merged


def _next_element(
    content: str, markers: tuple[str, ...], pos: int
) -> tuple[Tag, Element | None] | None:
    """Find the earliest start tag among ``markers`` at or after ``pos``.

    Returns:
        The winning tag with its element (None when the element is unclosed),
        or None when no marker remains
    """
    candidates = [
        tag for tag in (find_opening_tag(content, name, pos) for name in markers) if tag is not None
    ]
    if not candidates:
        return None
    # min() keeps the first of equal offsets, which gives the marker priority
    tag = min(candidates, key=lambda candidate: candidate.start)
    return tag, element_at(content, tag)


def structure_paragraph(content: str, use_highlights: bool = False) -> list[Span]:
    """Split a paragraph's content into plain, inserted and deleted spans.

    Args:
        content: Markup between a paragraph's opening and closing tags
        use_highlights: Also treat green/red highlighted runs as insertions/deletions

    Returns:
        Spans in document order, with adjacent same-type changes merged.
        Elements whose text is empty produce no span.
    """
    spans: list[Span] = []
    pos = 0

    while pos < len(content):
        found = _next_element(content, _SPAN_MARKERS, pos)
        if found is None:
            break

        tag, element = found
        if element is None:
            logger.debug("Unclosed <%s> at offset %d; skipping", tag.name, tag.start)
            pos = tag.start + 1
            continue
        pos = element.end

        if tag.name in _CHANGE_MARKERS:
            if tag.name == INSERTION_TAG:
                span = Span(SpanType.INSERTED, extract_inserted_text(element.inner))
            else:
                span = Span(SpanType.DELETED, extract_deleted_text(element.inner))
            if not span.content:
                # A wrapper with no text of its own may still hold a nested change
                pos = tag.end
                continue
        else:
            if WrapperDepth.of_prefix(content[: tag.start]).inside_change:
                continue
            span_type = highlight_type(element.inner) if use_highlights else SpanType.PLAIN
            span = Span(span_type, extract_text(element.inner, TEXT_TAG))

        if span.content:
            spans.append(span)

    return merge_adjacent_spans(spans)


def _paragraph_changes(
    paragraph: Paragraph, kinds: frozenset[ChangeType]
) -> Iterator[TrackedChange]:
    content = paragraph.content
    pos = 0

    while pos < len(content):
        found = _next_element(content, _CHANGE_MARKERS, pos)
        if found is None:
            break

        tag, element = found
        if element is None:
            logger.debug(
                "Unclosed <%s> in paragraph %d; skipping", tag.name, paragraph.number
            )
            pos = tag.start + 1
            continue

        if tag.name == INSERTION_TAG:
            change_type = ChangeType.INSERTION
            text = extract_inserted_text(element.inner)
        else:
            change_type = ChangeType.DELETION
            text = extract_deleted_text(element.inner)

        # Step inside a wrapper with no text of its own to reach nested changes
        pos = element.end if text else tag.end
        if change_type not in kinds or not text:
            continue

        yield TrackedChange(
            change_type=change_type,
            author=element.get("w:author") or UNKNOWN_AUTHOR,
            date=parse_ooxml_date(element.get("w:date")),
            text=text,
            paragraph_number=paragraph.number,
            context_before=extract_all_text(content[: element.start]),
            context_after=extract_all_text(content[element.end :]),
        )


def extract_tracked_changes(
    xml: str,
    kinds: Iterable[ChangeType] = (ChangeType.INSERTION, ChangeType.DELETION),
) -> tuple[list[TrackedChange], str]:
    """Extract tracked changes with their full paragraph context.

    Args:
        xml: Contents of ``word/document.xml``
        kinds: Change types to report. When both are requested they are
            interleaved in document order.

    Returns:
        Tuple of (changes in document order, full document text). The full
        text is every paragraph's text joined by single newlines.

    Example:
        >>> changes, full_text = extract_tracked_changes(document_xml)
        >>> [change.text for change in changes if change.is_insertion]
        ['inserted text']
    """
    wanted = frozenset(kinds)
    paragraphs = find_paragraphs(xml)

    changes: list[TrackedChange] = []
    for paragraph in paragraphs:
        changes.extend(_paragraph_changes(paragraph, wanted))

    logger.debug("Found %d tracked changes in %d paragraphs", len(changes), len(paragraphs))
    return changes, "\n".join(paragraph.text for paragraph in paragraphs)
