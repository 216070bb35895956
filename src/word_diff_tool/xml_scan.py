"""
Lightweight tag scanning over raw WordprocessingML strings.

The document body is never parsed into a tree. Instead this module finds tags by
regular expression and pairs each opening tag with the first closing tag of the
same name that follows it. That is enough for the narrow, fixed-prefix schema
of ``word/document.xml`` and keeps every offset available for the paragraph and
comment logic built on top.

Known limitations:
- nested elements with the same tag name are not depth-tracked
- only the six entities in ``XML_ENTITIES`` are decoded; others pass through
- an opening tag without a closing tag ends the scan for that tag name
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

from .constants import DELETED_TEXT_TAG, TEXT_TAG, XML_ENTITIES

logger = logging.getLogger(__name__)

# Any start, end or empty-element tag with a (possibly prefixed) name
_TAG_PATTERN = re.compile(r"<(/?)([A-Za-z_][\w.-]*(?::[\w.-]+)?)((?:\s[^>]*?)?)\s*(/?)>")
_ATTR_PATTERN = re.compile(r"""([\w.-]+(?::[\w.-]+)?)\s*=\s*(["'])(.*?)\2""", re.DOTALL)


class TagKind(Enum):
    """Kinds of tag token."""

    OPEN = "open"
    CLOSE = "close"
    EMPTY = "empty"


@dataclass(frozen=True)
class Tag:
    """A single tag token found in the markup.

    Attributes:
        kind: Whether this is an opening, closing or self-closing tag
        name: Qualified tag name, e.g. "w:ins"
        start: Offset of the "<"
        end: Offset just past the ">"
        attrs: Decoded attribute values keyed by qualified name
    """

    kind: TagKind
    name: str
    start: int
    end: int
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Element:
    """An opening/closing tag pair and the markup between them.

    Offsets are relative to the string the element was found in.
    """

    name: str
    start: int
    end: int
    inner_start: int
    inner_end: int
    attrs: dict[str, str]
    outer: str
    inner: str

    def get(self, attr: str, default: str = "") -> str:
        """Return an attribute value, or ``default`` when absent."""
        return self.attrs.get(attr, default)


def decode_entities(text: str) -> str:
    """Decode the XML entities Word writes into text leaves.

    Example:
        >>> decode_entities("Tom &amp; Jerry &lt;3")
        'Tom & Jerry <3'
    """
    for entity, char in XML_ENTITIES:
        text = text.replace(entity, char)
    return text


def parse_attributes(text: str) -> dict[str, str]:
    """Parse the attribute section of a tag into a dict."""
    return {name: decode_entities(value) for name, _, value in _ATTR_PATTERN.findall(text)}


def iter_tags(xml: str, names: Iterable[str] | None = None, pos: int = 0) -> Iterator[Tag]:
    """Yield tag tokens in document order.

    Args:
        xml: Markup to scan
        names: Optional set of qualified tag names to restrict the scan to
        pos: Offset to start scanning from; reported offsets stay absolute

    Yields:
        Tag tokens for start, end and empty-element tags
    """
    wanted = set(names) if names is not None else None
    for match in _TAG_PATTERN.finditer(xml, pos):
        closing, name, attr_text, empty = match.groups()
        if wanted is not None and name not in wanted:
            continue
        if closing:
            kind = TagKind.CLOSE
        elif empty:
            kind = TagKind.EMPTY
        else:
            kind = TagKind.OPEN
        yield Tag(
            kind=kind,
            name=name,
            start=match.start(),
            end=match.end(),
            attrs=parse_attributes(attr_text) if attr_text else {},
        )


@lru_cache(maxsize=64)
def _opening_pattern(tag_name: str) -> re.Pattern[str]:
    # The lookahead keeps "w:r" from matching "w:rPr" and "w:del" from "w:delText"
    return re.compile(rf"<{re.escape(tag_name)}(?=[\s/>])((?:\s[^>]*?)?)\s*(/?)>")


def find_opening_tag(xml: str, tag_name: str, pos: int = 0) -> Tag | None:
    """Find the next opening (or empty-element) tag with this exact name."""
    match = _opening_pattern(tag_name).search(xml, pos)
    if match is None:
        return None
    attr_text, empty = match.groups()
    return Tag(
        kind=TagKind.EMPTY if empty else TagKind.OPEN,
        name=tag_name,
        start=match.start(),
        end=match.end(),
        attrs=parse_attributes(attr_text) if attr_text else {},
    )


def element_at(xml: str, tag: Tag) -> Element | None:
    """Pair an opening tag with the first matching closing tag after it.

    Returns:
        The element, or None when no closing tag follows
    """
    if tag.kind is TagKind.EMPTY:
        return Element(
            name=tag.name,
            start=tag.start,
            end=tag.end,
            inner_start=tag.end,
            inner_end=tag.end,
            attrs=tag.attrs,
            outer=xml[tag.start : tag.end],
            inner="",
        )

    closing = f"</{tag.name}>"
    close_pos = xml.find(closing, tag.end)
    if close_pos == -1:
        return None

    end = close_pos + len(closing)
    return Element(
        name=tag.name,
        start=tag.start,
        end=end,
        inner_start=tag.end,
        inner_end=close_pos,
        attrs=tag.attrs,
        outer=xml[tag.start : end],
        inner=xml[tag.end : close_pos],
    )


def find_elements(xml: str, tag_name: str) -> list[Element]:
    """Find every element with the given tag name, in document order.

    Scanning resumes after each element's closing tag, so an element nested
    inside another of the same name is not reported separately.

    Args:
        xml: Markup to scan
        tag_name: Qualified tag name, e.g. "w:p"

    Returns:
        Elements in document order. An unclosed element ends the scan and is
        dropped.
    """
    elements: list[Element] = []
    pos = 0
    while True:
        tag = find_opening_tag(xml, tag_name, pos)
        if tag is None:
            break
        element = element_at(xml, tag)
        if element is None:
            logger.debug("Unclosed <%s> at offset %d; dropping rest of scan", tag_name, tag.start)
            break
        elements.append(element)
        pos = element.end
    return elements


def has_element(xml: str, tag_name: str) -> bool:
    """Check whether the markup contains at least one tag with this name."""
    return find_opening_tag(xml, tag_name) is not None


def extract_text(xml: str, leaf: str = TEXT_TAG) -> str:
    """Concatenate the decoded content of every text leaf, in document order.

    Args:
        xml: Markup to scan
        leaf: The text-leaf tag to read (``w:t`` or ``w:delText``)

    Returns:
        The joined text, or an empty string when there are no leaves
    """
    return "".join(decode_entities(element.inner) for element in find_elements(xml, leaf))


def extract_all_text(xml: str) -> str:
    """Extract inserted, deleted and plain text together, in document order.

    This is the text a reader sees with all markup shown, and is what context
    windows and uniqueness checks are measured against.
    """
    leaves = find_elements(xml, TEXT_TAG) + find_elements(xml, DELETED_TEXT_TAG)
    leaves.sort(key=lambda element: element.start)
    return "".join(decode_entities(element.inner) for element in leaves)
