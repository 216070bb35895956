"""Tests for applying and generating CriticMarkup."""

import pytest

from word_diff_tool.criticmarkup import (
    apply_markup,
    apply_markup_file,
    diff_markup_files,
    generate_markup,
    render_spans,
)
from word_diff_tool.models import Span, SpanType

TEXT_PAIRS = [
    ("", ""),
    ("", "brand new"),
    ("all gone", ""),
    ("The cat sat.", "The dog sat."),
    ("Hello world", "Hello new world"),
    ("one\ntwo\nthree\n", "one\n2\nthree\nfour\n"),
    ("Die Straße ist naß.", "Die Strasse ist nass."),
    ("aaaa", "aaaaaa"),
    ("- item\n- other", "- item\n-- nested\n- other"),
    ("", "a {--b--} c"),
    ("old", "use {-- and --} to delete"),
    ("x {++y++} z", "x {++y++} z!"),
    ("remove --} this", "keep"),
    ("start {-- mid", "start {-- end --}"),
    ("f(x) {a", "f(x) {++a"),
    ("{+", "{++"),
    ("a{ b", "a{++b"),
    ("", "++} and --}"),
]


class TestApplyMarkup:
    """Tests for resolving markup."""

    def test_example_sentence(self):
        assert apply_markup("This {--is--}{++was++} a test {++document++}.") == (
            "This was a test document."
        )

    def test_no_markup(self):
        assert apply_markup("Plain text.") == "Plain text."

    def test_multiline(self):
        assert apply_markup("a{++b\nc++}d{--e\nf--}g") == "ab\ncdg"

    def test_non_greedy(self):
        assert apply_markup("{--a--} keep {--b--}") == " keep "
        assert apply_markup("{++a++} and {++b++}") == "a and b"

    def test_empty_bodies(self):
        assert apply_markup("x{++++}y{----}z") == "xyz"

    @pytest.mark.parametrize(
        "text",
        [
            "This {--is--}{++was++} a test.",
            "{++only insert++}",
            "{--only delete--}",
            "Nothing to do here",
        ],
    )
    def test_idempotent(self, text):
        once = apply_markup(text)
        assert apply_markup(once) == once


class TestGenerateMarkup:
    """Tests for diffing two texts into markup."""

    def test_word_replacement(self):
        assert generate_markup("The cat sat.", "The dog sat.") == "The {--cat--}{++dog++} sat."

    def test_pure_insertion(self):
        assert generate_markup("", "new") == "{++new++}"

    def test_pure_deletion(self):
        assert generate_markup("old", "") == "{--old--}"

    @pytest.mark.parametrize("old, new", TEXT_PAIRS)
    def test_round_trip(self, old, new):
        assert apply_markup(generate_markup(old, new)) == new

    @pytest.mark.parametrize("text", ["", "unchanged", "multi\nline\n", "Ünïcödé"])
    def test_identical_texts(self, text):
        result = generate_markup(text, text)
        assert result == text
        assert "{++" not in result
        assert "{--" not in result

    def test_literal_delimiter_in_unchanged_text(self):
        text = "a {--b--} c"
        assert generate_markup(text, text) == "a {{++++}--b--} c"
        assert apply_markup(generate_markup(text, text)) == text

    def test_literal_delimiter_in_insertion(self):
        result = generate_markup("", "a {--b--} c")
        assert result == "{++a {-++}{++-b--} c++}"
        assert apply_markup(result) == "a {--b--} c"

    def test_closing_delimiter_in_deletion(self):
        result = generate_markup("x--}y", "")
        assert result == "{--x----}{--}y--}"
        assert apply_markup(result) == ""


class TestRenderSpans:
    """Tests for rendering paragraph spans."""

    def test_render(self):
        spans = [
            Span(SpanType.PLAIN, "The "),
            Span(SpanType.DELETED, "cat"),
            Span(SpanType.INSERTED, "dog"),
            Span(SpanType.PLAIN, " sat."),
        ]
        assert render_spans(spans) == "The {--cat--}{++dog++} sat."

    def test_render_empty(self):
        assert render_spans([]) == ""


class TestMarkupFiles:
    """Tests for the file-level wrappers."""

    def test_apply_markup_file(self, tmp_path):
        source = tmp_path / "draft.md"
        source.write_text("Hello {--old --}{++new ++}world", encoding="utf-8")
        output = tmp_path / "clean.md"

        result = apply_markup_file(source, output)

        assert result == "Hello new world"
        assert output.read_text(encoding="utf-8") == "Hello new world"

    def test_apply_markup_file_without_output(self, tmp_path):
        source = tmp_path / "draft.md"
        source.write_text("{++a++}", encoding="utf-8")
        assert apply_markup_file(source) == "a"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["draft.md"]

    def test_diff_markup_files(self, tmp_path):
        first = tmp_path / "first.md"
        second = tmp_path / "second.md"
        first.write_text("# Title\n\nThe cat sat.\n", encoding="utf-8")
        second.write_text("# Title\n\nThe dog sat.\n", encoding="utf-8")
        output = tmp_path / "diff.md"

        result = diff_markup_files(first, second, output)

        assert result == "# Title\n\nThe {--cat--}{++dog++} sat.\n"
        assert output.read_text(encoding="utf-8") == result

    def test_diff_applies_existing_markup_first(self, tmp_path):
        first = tmp_path / "first.md"
        second = tmp_path / "second.md"
        first.write_text("Hello {--old--}world", encoding="utf-8")
        second.write_text("Hello world{++!++}", encoding="utf-8")

        result = diff_markup_files(first, second)

        assert "old" not in result
        assert apply_markup(result) == "Hello world!"
