"""Tests for the regex tag scanner over WordprocessingML."""

from word_diff_tool.xml_scan import (
    TagKind,
    decode_entities,
    extract_all_text,
    extract_text,
    find_elements,
    find_opening_tag,
    has_element,
    iter_tags,
    parse_attributes,
)


class TestDecodeEntities:
    """Tests for entity decoding."""

    def test_basic_entities(self):
        """Decode the standard XML entities."""
        assert decode_entities("&lt;b&gt; &quot;x&quot; &apos;y&apos;") == "<b> \"x\" 'y'"

    def test_amp_decoded_last(self):
        """An escaped entity reference decodes once, not twice."""
        assert decode_entities("&amp;lt;") == "&lt;"
        assert decode_entities("Tom &amp; Jerry") == "Tom & Jerry"

    def test_nbsp(self):
        assert decode_entities("a&nbsp;b") == "a b"

    def test_unknown_entities_pass_through(self):
        assert decode_entities("&copy; 2024") == "&copy; 2024"


class TestTags:
    """Tests for tag tokens and attributes."""

    def test_iter_tags_kinds(self):
        """Opening, closing and self-closing tags are told apart."""
        tags = list(iter_tags('<w:p><w:r/><w:br /></w:p>'))
        assert [(tag.kind, tag.name) for tag in tags] == [
            (TagKind.OPEN, "w:p"),
            (TagKind.EMPTY, "w:r"),
            (TagKind.EMPTY, "w:br"),
            (TagKind.CLOSE, "w:p"),
        ]

    def test_iter_tags_filtered(self):
        xml = '<w:p><w:ins w:id="1"><w:r/></w:ins></w:p>'
        tags = list(iter_tags(xml, ("w:ins",)))
        assert [tag.kind for tag in tags] == [TagKind.OPEN, TagKind.CLOSE]
        assert tags[0].attrs == {"w:id": "1"}

    def test_parse_attributes(self):
        """Attribute values are decoded; both quote styles are accepted."""
        attrs = parse_attributes(' w:author="A &amp; B" w:id=\'3\'')
        assert attrs == {"w:author": "A & B", "w:id": "3"}

    def test_find_opening_tag_exact_name(self):
        """A w:r search does not stop at w:rPr."""
        xml = "<w:rPr/><w:r><w:t>x</w:t></w:r>"
        tag = find_opening_tag(xml, "w:r")
        assert tag is not None
        assert tag.start == xml.index("<w:r>")

    def test_has_element(self):
        assert has_element("<w:delText>x</w:delText>", "w:delText")
        assert not has_element("<w:delText>x</w:delText>", "w:del")


class TestFindElements:
    """Tests for pairing opening and closing tags."""

    def test_elements_with_offsets(self):
        xml = "<w:p>one</w:p><w:p>two</w:p>"
        elements = find_elements(xml, "w:p")
        assert [element.inner for element in elements] == ["one", "two"]
        assert elements[1].start == 14
        assert elements[1].end == len(xml)
        assert xml[elements[1].inner_start : elements[1].inner_end] == "two"

    def test_run_does_not_match_run_properties(self):
        xml = "<w:r><w:rPr><w:b/></w:rPr><w:t>x</w:t></w:r>"
        elements = find_elements(xml, "w:r")
        assert len(elements) == 1
        assert elements[0].outer == xml

    def test_self_closing_element_is_empty(self):
        elements = find_elements("<w:t/><w:t>a</w:t>", "w:t")
        assert [element.inner for element in elements] == ["", "a"]

    def test_unclosed_element_ends_scan(self):
        """An opening tag without a closing tag drops the rest of the scan."""
        elements = find_elements("<w:p>one</w:p><w:p>two", "w:p")
        assert [element.inner for element in elements] == ["one"]

    def test_element_attributes(self):
        elements = find_elements('<w:ins w:author="Ann">x</w:ins>', "w:ins")
        assert elements[0].get("w:author") == "Ann"
        assert elements[0].get("w:date") == ""


class TestExtractText:
    """Tests for text leaf extraction."""

    def test_extract_text_joins_leaves(self):
        xml = '<w:r><w:t>Hello</w:t></w:r><w:r><w:t xml:space="preserve"> world</w:t></w:r>'
        assert extract_text(xml) == "Hello world"

    def test_extract_text_decodes(self):
        assert extract_text("<w:t>a &lt; b</w:t>") == "a < b"

    def test_extract_text_no_leaves(self):
        assert extract_text("<w:r><w:tab/></w:r>") == ""

    def test_extract_text_ignores_deleted_text(self):
        """w:t does not match w:delText."""
        assert extract_text("<w:delText>gone</w:delText><w:t>kept</w:t>") == "kept"

    def test_extract_all_text_in_document_order(self):
        xml = (
            "<w:r><w:t>keep </w:t></w:r>"
            "<w:del><w:r><w:delText>gone</w:delText></w:r></w:del>"
            "<w:r><w:t> end</w:t></w:r>"
        )
        assert extract_all_text(xml) == "keep gone end"
