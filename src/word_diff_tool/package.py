"""
OOXMLPackage class for reading the parts of a Word document package.

This module keeps ZIP handling away from the text extraction code: callers ask
for a named part and get back its UTF-8 text (or a parsed lxml element).
"""

import io
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .errors import DocumentNotFoundError, InvalidDocumentError, MissingPartError

logger = logging.getLogger(__name__)


class OOXMLPackage:
    """Read-only view of an extracted OOXML ZIP package.

    The archive is extracted into a scratch directory that is removed by
    `close()`. Use the package as a context manager so the directory is
    removed on both success and failure.

    Example:
        >>> with OOXMLPackage.open("review.docx") as pkg:
        ...     document_xml = pkg.read_text("word/document.xml")
        ...     has_comments = pkg.part_exists("word/comments.xml")
    """

    def __init__(self, temp_dir: Path, source_path: Path | None = None) -> None:
        """Initialize package with an already-extracted directory.

        Use the class methods `open()` or `from_bytes()` instead of
        calling this constructor directly.

        Args:
            temp_dir: Path to the extracted package contents
            source_path: Original source file path (for error messages)
        """
        self._temp_dir = temp_dir
        self._source_path = source_path
        self._closed = False

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "OOXMLPackage":
        """Open an OOXML package from a file path or file-like object.

        Args:
            source: Path to .docx file or file-like object containing it

        Returns:
            OOXMLPackage instance with extracted contents

        Raises:
            DocumentNotFoundError: If a path is given and it does not exist
            InvalidDocumentError: If the source is not a valid ZIP file
        """
        source_path: Path | None = None

        if isinstance(source, str | Path):
            source_path = Path(source)
            if not source_path.exists():
                raise DocumentNotFoundError(source_path)
            zip_source: Path | BinaryIO = source_path
        else:
            zip_source = source

        if not zipfile.is_zipfile(zip_source):
            raise InvalidDocumentError("Source must be a valid .docx (ZIP) file")

        # is_zipfile() leaves streams positioned at the end
        if hasattr(zip_source, "seek"):
            zip_source.seek(0)

        temp_dir = Path(tempfile.mkdtemp(prefix="word_diff_tool_"))
        try:
            with zipfile.ZipFile(zip_source, "r") as zip_ref:
                zip_ref.extractall(temp_dir)
        except Exception as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise InvalidDocumentError(f"Failed to extract .docx file: {e}") from e

        logger.debug("Extracted %s to %s", source_path or "stream", temp_dir)
        return cls(temp_dir, source_path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "OOXMLPackage":
        """Open an OOXML package from bytes.

        Args:
            data: Bytes containing a .docx file

        Returns:
            OOXMLPackage instance with extracted contents
        """
        return cls.open(io.BytesIO(data))

    @property
    def source_path(self) -> Path | None:
        """Get the original source file path, if available."""
        return self._source_path

    def get_part_path(self, part_name: str) -> Path:
        """Get the filesystem path to a package part."""
        return self._temp_dir / part_name

    def part_exists(self, part_name: str) -> bool:
        """Check if a package part exists."""
        return self.get_part_path(part_name).is_file()

    def read_text(self, part_name: str) -> str:
        """Read a package part as UTF-8 text.

        Args:
            part_name: Relative path within the package (e.g., "word/document.xml")

        Returns:
            The decoded part contents

        Raises:
            MissingPartError: If the part does not exist
        """
        if not self.part_exists(part_name):
            raise MissingPartError(part_name, self._source_path)
        return self.get_part_path(part_name).read_text(encoding="utf-8")

    def get_part(self, part_name: str) -> etree._Element | None:
        """Get a package part as a parsed XML element.

        Args:
            part_name: Relative path within the package (e.g., "word/comments.xml")

        Returns:
            Parsed XML element tree, or None if part doesn't exist

        Raises:
            InvalidDocumentError: If the part is not well-formed XML
        """
        if not self.part_exists(part_name):
            return None

        parser = etree.XMLParser(remove_blank_text=False)
        try:
            tree = etree.parse(str(self.get_part_path(part_name)), parser)
        except etree.XMLSyntaxError as e:
            raise InvalidDocumentError(f"Could not parse {part_name}: {e}") from e
        return tree.getroot()

    def close(self) -> None:
        """Remove the scratch directory."""
        if not self._closed and self._temp_dir.exists():
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            logger.debug("Removed %s", self._temp_dir)
        self._closed = True

    def __enter__(self) -> "OOXMLPackage":
        """Context manager support."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager cleanup."""
        self.close()

    def __del__(self) -> None:
        """Clean up temporary directory on garbage collection."""
        if hasattr(self, "_temp_dir"):
            self.close()
