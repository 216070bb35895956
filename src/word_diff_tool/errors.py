"""
Custom exception classes for the word_diff_tool package.

Only fatal input problems are raised as exceptions. Malformed fragments inside a
document (an unclosed tracked change, a comment range without an end marker) are
skipped where they are found and never reach the caller.
"""

from pathlib import Path


class WordDiffError(Exception):
    """Base exception for all word_diff_tool errors."""

    pass


class DocumentNotFoundError(WordDiffError):
    """Raised when the input path does not exist.

    Attributes:
        path: The path that was requested
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Input file not found: {self.path}")


class InvalidDocumentError(WordDiffError):
    """Raised when the input is not a usable Word document.

    This can occur when:
    - The file is not a ZIP archive
    - A package part contains XML that cannot be parsed
    """

    pass


class MissingPartError(WordDiffError):
    """Raised when a required part is absent from the document package.

    Attributes:
        part_name: The package part that was requested (e.g. "word/document.xml")
        source: The document the part was requested from, if known
    """

    def __init__(self, part_name: str, source: str | Path | None = None) -> None:
        self.part_name = part_name
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the missing part."""
        name = self.part_name.rsplit("/", 1)[-1]
        msg = f"{name} not found in the .docx file"
        if self.source:
            msg += f" ({self.source})"
        return msg
