"""
Tests for the git-style diff report and its structured output.
"""

import json

import pytest
import yaml

from docx_builders import (
    comment,
    comments_xml,
    dele,
    document_xml,
    ins,
    paragraph,
    review_document,
    run,
    write_docx,
)
from word_diff_tool.errors import DocumentNotFoundError, MissingPartError
from word_diff_tool.git_diff import (
    FORMAT_HEADER,
    build_diff_output,
    escape_newlines,
    format_as_git_diff,
    format_as_json,
    format_as_yaml,
    generate_git_diff,
    to_dict,
)
from word_diff_tool.models import Comment


def _body_lines(report: str) -> list[str]:
    """Lines after the fixed header."""
    return report[len(FORMAT_HEADER) :].strip("\n").split("\n")


class TestGenerateGitDiff:
    """Tests for building a DiffOutput from a .docx file."""

    def test_review_document(self, tmp_path):
        document, comments = review_document()
        path = write_docx(tmp_path / "review.docx", document, comments)

        output = generate_git_diff(path)

        assert output.filename == "review.docx"
        assert [c.text for c in output.changes] == ["foo", "bar"]
        assert [c.author for c in output.comments] == ["Ann"]
        assert output.full_text == "Hello foo world\nSome bar text\nPlease review this."

    def test_without_comments_part(self, tmp_path):
        path = write_docx(tmp_path / "plain.docx", document_xml(paragraph(run("Text"))))
        output = generate_git_diff(path)
        assert output.changes == ()
        assert output.comments == ()

    def test_accepts_string_path(self, tmp_path):
        path = write_docx(tmp_path / "plain.docx", document_xml(paragraph(run("Text"))))
        assert generate_git_diff(str(path)).filename == "plain.docx"

    def test_stream_uses_default_name(self, tmp_path):
        path = write_docx(tmp_path / "plain.docx", document_xml(paragraph(run("Text"))))
        with path.open("rb") as stream:
            assert generate_git_diff(stream).filename == "document.docx"

    def test_missing_document_part(self, tmp_path):
        path = write_docx(tmp_path / "broken.docx", None)
        with pytest.raises(MissingPartError, match="document.xml not found"):
            generate_git_diff(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentNotFoundError):
            generate_git_diff(tmp_path / "nope.docx")


class TestFormatAsGitDiff:
    """Tests for the text report."""

    def test_review_document_report(self, tmp_path):
        document, comments = review_document()
        path = write_docx(tmp_path / "review.docx", document, comments)

        report = format_as_git_diff(generate_git_diff(path))

        assert report.startswith(FORMAT_HEADER)
        assert _body_lines(report) == [
            "diff --word a/review.docx b/review.docx",
            "--- a/review.docx",
            "+++ b/review.docx",
            "@@ paragraph 1 @@",
            '+foo  # "Hello [...] world"',
            "@@ paragraph 2 @@",
            '-bar  # "Some [...] text"',
            "@@ paragraph 3 @@",
            '> [Ann]: check this  # "...se review this.>|<"',
        ]

    def test_no_changes(self):
        output = build_diff_output("empty.docx", document_xml(paragraph(run("Nothing"))))
        assert _body_lines(format_as_git_diff(output)) == [
            "diff --word a/empty.docx b/empty.docx",
            "--- a/empty.docx",
            "+++ b/empty.docx",
        ]

    def test_change_without_context_has_no_quote(self):
        output = build_diff_output("d.docx", document_xml(paragraph(ins("Everything"))))
        assert _body_lines(format_as_git_diff(output))[-1] == "+Everything"

    def test_changes_before_comments_in_paragraph(self):
        xml = document_xml(
            paragraph(
                '<w:commentRangeStart w:id="0"/>',
                run("Intro"),
                '<w:commentRangeEnd w:id="0"/>',
                run(" and "),
                ins("added"),
            )
        )
        note = Comment(
            id="0",
            author="Ann",
            date=None,
            text="Why?",
            anchored_text="Intro",
            context_after=" and added",
            paragraph_number=1,
        )
        lines = _body_lines(format_as_git_diff(build_diff_output("d.docx", xml, [note])))
        assert lines[3:] == [
            "@@ paragraph 1 @@",
            '+added  # "Intro and"',
            '> [Ann]: Why?  # "[Intro]"',
        ]

    def test_unanchored_comment_in_paragraph_zero(self):
        orphan = Comment(id="9", author="Ben", date=None, text="General remark")
        output = build_diff_output("d.docx", document_xml(paragraph(ins("x"))), [orphan])
        lines = _body_lines(format_as_git_diff(output))
        assert lines[3:5] == [
            "@@ paragraph 0 @@",
            '> [Ben]: General remark  # "(empty paragraph)"',
        ]
        assert lines[5] == "@@ paragraph 1 @@"

    def test_newlines_escaped(self):
        note = Comment(
            id="1",
            author="Ann",
            date=None,
            text="line one\nline two",
            anchored_text="a\r\nb",
            paragraph_number=1,
        )
        output = build_diff_output("d.docx", document_xml(paragraph(run("x"))), [note])
        line = _body_lines(format_as_git_diff(output))[-1]
        assert line == '> [Ann]: line one␊line two  # "[a␊b]"'

    def test_escape_newlines(self):
        assert escape_newlines("a\r\nb\nc\rd") == "a␊b␊c␊d"


class TestStructuredOutput:
    """Tests for JSON and YAML output."""

    @pytest.fixture
    def output(self):
        xml = document_xml(paragraph(run("Café "), ins("au lait", author="Zoë")))
        note = Comment(
            id="1", author="Ann", date=None, text="Nice", anchored_text="Café", paragraph_number=1
        )
        return build_diff_output("menu.docx", xml, [note])

    def test_to_dict(self, output):
        data = to_dict(output)
        assert data["filename"] == "menu.docx"
        assert data["full_text"] == "Café au lait"
        assert data["changes"] == [
            {
                "type": "insertion",
                "author": "Zoë",
                "date": "2024-01-01T00:00:00+00:00",
                "text": "au lait",
                "paragraph_number": 1,
                "context_before": "Café ",
                "context_after": "",
            }
        ]
        assert data["comments"][0]["anchored_text"] == "Café"
        assert data["comments"][0]["date"] is None

    def test_json(self, output):
        text = format_as_json(output)
        assert "Zoë" in text
        assert json.loads(text) == to_dict(output)

    def test_yaml(self, output):
        text = format_as_yaml(output)
        assert text.startswith("filename: menu.docx")
        assert yaml.safe_load(text) == to_dict(output)

    def test_json_from_document(self, tmp_path):
        document = document_xml(paragraph(run("Keep "), dele("this")))
        path = write_docx(
            tmp_path / "d.docx", document, comments_xml(comment(3, "Ann", "unanchored"))
        )
        data = json.loads(format_as_json(generate_git_diff(path)))
        assert data["changes"][0]["type"] == "deletion"
        assert data["comments"][0]["paragraph_number"] == 0
