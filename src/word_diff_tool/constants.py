"""
Centralized constants for WordprocessingML tags, markup delimiters and context windows.

Every tunable used by the extraction and formatting pipeline lives here so that
the keyword-argument defaults across modules stay consistent.
"""

# =============================================================================
# Package Parts
# =============================================================================

DOCUMENT_PART = "word/document.xml"
COMMENTS_PART = "word/comments.xml"

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


# =============================================================================
# WordprocessingML Tag Names (fixed "w:" prefix)
# =============================================================================

PARAGRAPH_TAG = "w:p"
RUN_TAG = "w:r"
INSERTION_TAG = "w:ins"
DELETION_TAG = "w:del"
TEXT_TAG = "w:t"
DELETED_TEXT_TAG = "w:delText"
HIGHLIGHT_TAG = "w:highlight"
SHADING_TAG = "w:shd"

COMMENT_RANGE_START_TAG = "w:commentRangeStart"
COMMENT_RANGE_END_TAG = "w:commentRangeEnd"
COMMENT_REFERENCE_TAG = "w:commentReference"

# Entities decoded by the text extractor, in application order.
# &amp; must come last so that "&amp;lt;" decodes to "&lt;" and not "<".
XML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
)


# =============================================================================
# Highlight Mode
# =============================================================================

INSERTION_HIGHLIGHTS = frozenset({"green"})
DELETION_HIGHLIGHTS = frozenset({"red"})

INSERTION_SHADING_FILLS = frozenset({"00ff00", "92d050", "00b050"})
DELETION_SHADING_FILLS = frozenset({"ff0000", "ff6666", "ff9999"})


# =============================================================================
# CriticMarkup Delimiters
# =============================================================================

INSERTION_OPEN = "{++"
INSERTION_CLOSE = "++}"
DELETION_OPEN = "{--"
DELETION_CLOSE = "--}"


# =============================================================================
# Context Windows
# =============================================================================

# Tracked changes: "before [...] after"
CHANGE_CONTEXT_MIN = 10
CHANGE_CONTEXT_MAX = 100

# Comments with a selection start with no context at all
COMMENT_CONTEXT_MAX = 30

# Point comments: "before>|<after"
POINT_CONTEXT_MIN = 15
POINT_CONTEXT_MAX = 30

CONTEXT_STEP = 10

ELLIPSIS = "..."
CURSOR_MARKER = ">|<"
EMPTY_PARAGRAPH_MARKER = "(empty paragraph)"
CHANGE_GAP_MARKER = " [...] "

# Visible stand-in for line breaks so each report line stays single-line
NEWLINE_PLACEHOLDER = "␊"

UNKNOWN_AUTHOR = "Unknown"
