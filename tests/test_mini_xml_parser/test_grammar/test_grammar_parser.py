"""Tests for the element, node and document grammar rules."""

import pytest

from mini_xml_parser.grammar import (
    Cursor,
    FailureKind,
    FatalParseError,
    NoMatch,
    Parser,
    encoding_declaration,
    version_number,
)
from mini_xml_parser.shared import ParserConfig
from mini_xml_parser.tree import DOCTYPE_ELEMENT_NAME, NodeKind


@pytest.fixture
def parser():
    """Parser without self-closing names."""
    return Parser()


@pytest.fixture
def img_parser():
    """Parser that lets <img> close with a bare '>'."""
    return Parser(self_closing_tags=["img"])


class TestElementStructure:
    """Test element names, attributes and children."""

    def test_nested_elements_with_text(self, parser):
        """Test element with attribute and two text-bearing children."""
        cursor, element = parser.element('<a x="1"><b>hi</b><b>bye</b></a>')

        assert cursor.at_end
        assert element.name == "a"
        assert element.attributes == {"x": "1"}
        children = element.child_elements()
        assert [child.name for child in children] == ["b", "b"]
        assert [child.text for child in children] == ["hi", "bye"]

    def test_names_and_keys_are_lower_cased(self, parser):
        """Test case folding of tag names, end tags and attribute keys."""
        _, element = parser.element("<Root HREF='X'><Inner></INNER></rOOT>")

        assert element.name == "root"
        assert element.attributes == {"href": "X"}
        assert element.child_elements()[0].name == "inner"

    def test_namespace_prefix_is_part_of_name(self, parser):
        _, element = parser.element("<svg:rect/>")
        assert element.name == "svg:rect"

    def test_attribute_values_kept_verbatim(self, parser):
        _, element = parser.element("<a title=\"Tom &amp; 'Jerry'\" empty=''/>")

        assert element.attributes == {"title": "Tom &amp; 'Jerry'", "empty": ""}

    def test_whitespace_around_attributes_and_end_tag(self, parser):
        cursor, element = parser.element("<a  x = '1'  ></  a  >")

        assert cursor.at_end
        assert element.attributes == {"x": "1"}
        assert element.children == []

    def test_whitespace_after_element_is_consumed(self, parser):
        cursor, _ = parser.element("<a/> \n\t next")
        assert cursor.remaining == "next"

    def test_leading_whitespace_after_open_tag_is_skipped(self, parser):
        _, element = parser.element("<a>  hi  </a>")
        assert element.children[0].as_char_data() == "hi  "

    def test_mixed_content_keeps_order(self, parser):
        _, element = parser.element("<p>one<b>two</b>three</p>")

        kinds = [child.kind for child in element.children]
        assert kinds == [NodeKind.CHAR_DATA, NodeKind.ELEMENT, NodeKind.CHAR_DATA]
        assert element.children[2].as_char_data() == "three"

    def test_cdata_is_not_reinterpreted(self, parser):
        """Test that markup inside CDATA stays text."""
        _, element = parser.element("<a><![CDATA[<b>x</b> & ]]></a>")

        assert len(element.children) == 1
        assert element.children[0].as_char_data() == "<b>x</b> & "

    def test_accepts_cursor_input(self, parser):
        cursor, element = parser.element(Cursor("xx<a/>", 2))

        assert element.name == "a"
        assert cursor.at_end


class TestElementFailures:
    """Test soft and fatal element failures."""

    def test_mismatched_end_tag_is_fatal(self, parser):
        with pytest.raises(FatalParseError) as excinfo:
            parser.element("<a><b></a>")

        assert excinfo.value.kind is FailureKind.MISMATCHED_END_TAG
        assert excinfo.value.is_fatal
        assert excinfo.value.remaining == "a>"

    @pytest.mark.parametrize("source", [
        '<a x="1" x="2"/>',
        '<a x="1" X="2"></a>',
        "<a k='1' b='2' c='3' K='4'/>",
    ])
    def test_duplicate_attribute_is_fatal(self, parser, source):
        with pytest.raises(FatalParseError, match="Duplicate attribute") as excinfo:
            parser.element(source)
        assert excinfo.value.kind is FailureKind.DUPLICATE_ATTRIBUTE

    def test_bare_greater_than_in_text_fails(self, parser):
        with pytest.raises(NoMatch) as excinfo:
            parser.element("<a>x > y</a>")
        assert excinfo.value.kind is FailureKind.NO_PROGRESS

    def test_missing_end_tag_fails(self, parser):
        with pytest.raises(NoMatch):
            parser.element("<a>text")

    def test_unquoted_attribute_fails(self, parser):
        with pytest.raises(NoMatch):
            parser.element("<a x=1/>")

    def test_space_before_name_fails(self, parser):
        with pytest.raises(NoMatch) as excinfo:
            parser.element("< a/>")
        assert excinfo.value.kind is FailureKind.EXPECTED_IDENTIFIER

    @pytest.mark.parametrize("source", ["<a!b/>", "<x!></x!>", "<!a/>"])
    def test_bang_outside_doctype_marker_fails(self, parser, source):
        """Test that '!' is only accepted as part of '<!DOCTYPE'."""
        with pytest.raises(NoMatch) as excinfo:
            parser.element(source)

        assert excinfo.value.kind is FailureKind.EXPECTED_IDENTIFIER
        assert excinfo.value.offset == 1

    def test_bang_name_inside_parent_falls_back_to_soft_failure(self, parser):
        with pytest.raises(NoMatch):
            parser.element("<p><x!></x!></p>")

    def test_fatal_error_is_not_caught_by_node(self, parser):
        """Test that node() only falls back to text on soft failures."""
        with pytest.raises(FatalParseError):
            parser.node("<b></c>")

    def test_fatal_error_inside_nested_child_aborts(self, parser):
        with pytest.raises(FatalParseError):
            parser.element("<a><b><c></b></c></a>")


class TestSelfClosing:
    """Test both closing strategies for childless elements."""

    def test_bare_close_leaves_following_input(self, img_parser):
        """Test <img> closes with a bare '>' and the rest is left over."""
        cursor, element = img_parser.element('<img src="x.png">rest')

        assert element.name == "img"
        assert element.attributes == {"src": "x.png"}
        assert element.children == []
        assert cursor.remaining == "rest"

    def test_bare_close_matches_case_insensitively(self, img_parser):
        cursor, element = img_parser.element("<IMG>")

        assert element.name == "img"
        assert cursor.at_end

    def test_slash_close_without_configuration(self, parser):
        cursor, element = parser.element("<br/>")

        assert element.children == []
        assert cursor.at_end

    def test_slash_close_with_configuration(self, img_parser):
        _, element = img_parser.element("<img src='a' />")
        assert element.children == []

    def test_bare_close_inside_parent(self):
        parser = Parser(self_closing_tags=["br"])
        _, element = parser.element("<p>a<br>b</p>")

        assert [child.kind for child in element.children] == [
            NodeKind.CHAR_DATA, NodeKind.ELEMENT, NodeKind.CHAR_DATA
        ]
        assert element.children[1].as_element().children == []

    def test_unconfigured_name_needs_end_tag(self, parser):
        """Test an unconfigured <br> swallows siblings and then mismatches."""
        with pytest.raises(FatalParseError):
            parser.element("<p>a<br>b</p>")

    def test_from_config(self):
        parser = Parser.from_config(ParserConfig.html())
        cursor, element = parser.element("<hr>")

        assert element.name == "hr"
        assert cursor.at_end


class TestDoctype:
    """Test the skipped doctype declaration."""

    def test_doctype_yields_sentinel(self, parser):
        cursor, element = parser.element("<!DOCTYPE html>")

        assert element.name == DOCTYPE_ELEMENT_NAME
        assert element.is_doctype
        assert element.attributes == {}
        assert element.children == []
        assert cursor.at_end

    def test_doctype_does_not_skip_trailing_whitespace(self, parser):
        cursor, _ = parser.element("<!DOCTYPE html>  <a/>")
        assert cursor.remaining == "  <a/>"

    def test_doctype_as_child(self, parser):
        _, element = parser.element("<html><!DOCTYPE x><body/></html>")

        assert [child.name for child in element.child_elements()] == [
            DOCTYPE_ELEMENT_NAME, "body"
        ]

    def test_unterminated_doctype_is_fatal(self, parser):
        with pytest.raises(FatalParseError) as excinfo:
            parser.element("<!DOCTYPE html")
        assert excinfo.value.kind is FailureKind.UNTERMINATED_DOCTYPE

    def test_marker_is_case_sensitive(self, parser):
        """Test that a lower-case doctype is not recognized."""
        with pytest.raises(NoMatch):
            parser.element("<!doctype html>")


class TestNode:
    """Test the element-or-text node rule."""

    def test_element_node(self, parser):
        cursor, node = parser.node("<a/>tail")

        assert node.is_element()
        assert cursor.remaining == "tail"

    def test_text_node(self, parser):
        cursor, node = parser.node("tail<a/>")

        assert node.as_char_data() == "tail"
        assert cursor.remaining == "<a/>"

    def test_failed_markup_falls_back_to_empty_text(self, parser):
        cursor, node = parser.node("<1>")

        assert node.as_char_data() == ""
        assert cursor.offset == 0


class TestVersionAndEncoding:
    """Test prolog value parsing."""

    @pytest.mark.parametrize("literal, expected", [
        ('"1.0"', 0),
        ('"1.23"', 23),
        ("'1.1'", 1),
        ('"1.007"', 7),
    ])
    def test_version_digits_after_prefix(self, literal, expected):
        cursor, version = version_number(Cursor(literal))

        assert version == expected
        assert cursor.at_end

    @pytest.mark.parametrize("literal", ['"2.0"', '"1."', '"1.x"', "\"1.0'", '1.0'])
    def test_invalid_version(self, literal):
        with pytest.raises(NoMatch):
            version_number(Cursor(literal))

    def test_invalid_version_kind(self):
        with pytest.raises(NoMatch) as excinfo:
            version_number(Cursor('"1."'))
        assert excinfo.value.kind is FailureKind.INVALID_VERSION

    def test_encoding_is_optional(self):
        cursor, encoding = encoding_declaration(Cursor("?>"))

        assert encoding is None
        assert cursor.offset == 0

    def test_encoding_value(self):
        cursor, encoding = encoding_declaration(Cursor("encoding = 'UTF-8'?>"))

        assert encoding == "UTF-8"
        assert cursor.remaining == "?>"


class TestDocument:
    """Test the document rule."""

    def test_document_with_encoding(self, parser):
        cursor, document = parser.document('<?xml version="1.0" encoding="utf-8"?><root/>')

        assert cursor.at_end
        assert document.version == 0
        assert document.encoding == "utf-8"
        assert document.root.name == "root"
        assert document.root.children == []

    def test_document_with_surrounding_whitespace(self, parser):
        cursor, document = parser.document("\n <?xml version='1.23' ?>\n<root>\n</root>\n")

        assert cursor.at_end
        assert document.version == 23
        assert document.encoding is None

    def test_missing_prolog_fails(self, parser):
        with pytest.raises(NoMatch):
            parser.document("<root/>")

    def test_bad_version_fails(self, parser):
        with pytest.raises(NoMatch) as excinfo:
            parser.document('<?xml version="2.0"?><root/>')
        assert excinfo.value.kind is FailureKind.INVALID_VERSION

    def test_doctype_becomes_root(self, parser):
        """Test a doctype after the prolog is taken as the root element."""
        cursor, document = parser.document('<?xml version="1.0"?><!DOCTYPE html><html/>')

        assert document.root.is_doctype
        assert cursor.remaining == "<html/>"


class TestCompleteParse:
    """Test the full-consumption entry points."""

    def test_complete_element_strips_blank_text(self, parser):
        """Test the CDATA example: blank text goes, CDATA stays untrimmed."""
        element = parser.complete_element("<a>  <![CDATA[ <b/> ]]>  </a>")

        assert element.name == "a"
        assert len(element.children) == 1
        assert element.children[0].as_char_data() == " <b/> "

    def test_retained_text_is_untrimmed(self, parser):
        element = parser.complete_element("<a>hi  <b/>  </a>")
        assert element.children[0].as_char_data() == "hi  "

    @pytest.mark.parametrize("source", [
        "<a/><b/>",
        "<a></a>garbage",
        "<a/> x",
    ])
    def test_leftover_input_gives_none(self, parser, source):
        assert parser.complete_element(source) is None

    def test_trailing_whitespace_is_accepted(self, parser):
        assert parser.complete_element("<a/>  \n") is not None

    @pytest.mark.parametrize("source", [
        "<a><b></a>",
        '<a x="1" x="2"/>',
        "<!DOCTYPE html",
        "",
        "text",
        "  <a/>",
    ])
    def test_failures_give_none(self, parser, source):
        assert parser.complete_element(source) is None

    def test_complete_element_leaves_remaining_for_bare_close(self, img_parser):
        assert img_parser.complete_element('<img src="x.png">rest') is None

    def test_complete_document(self, parser):
        document = parser.complete_document(
            '<?xml version="1.0"?>\n<root>\n  <item> a </item>\n</root>\n'
        )

        assert document.root.name == "root"
        assert len(document.root.children) == 1
        assert document.root.child_elements()[0].text == "a "

    def test_complete_document_rejects_doctype_then_root(self, parser):
        assert parser.complete_document('<?xml version="1.0"?><!DOCTYPE html><html/>') is None
