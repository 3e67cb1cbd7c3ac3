"""Tests for the top-level package interface."""

import mini_xml_parser
from mini_xml_parser import (
    FailureKind,
    MiniXMLParser,
    ParserConfig,
    elem_name,
    first,
    parse_document,
    parse_element,
    trim_whitespace,
)


class TestPackageInterface:
    """Test the progressive API exposed by the package."""

    def test_version_metadata(self) -> None:
        assert mini_xml_parser.__version__ == "0.1.0"
        assert mini_xml_parser.__author__

    def test_all_names_resolve(self) -> None:
        for name in mini_xml_parser.__all__:
            assert hasattr(mini_xml_parser, name), name

    def test_level_one_usage(self) -> None:
        element = parse_element("<list><item>a</item><item>b</item></list>")
        items = elem_name(element.child_nodes(), "item")

        assert [item.text for item in items] == ["a", "b"]
        assert first(items) is items[0]

    def test_level_two_usage(self) -> None:
        parser = MiniXMLParser(ParserConfig.html())

        assert parser.parse_element("<p>x<br>y</p>") is not None
        assert parser.diagnose("<p>").failure_kind is FailureKind.NO_PROGRESS

    def test_document_and_trim(self) -> None:
        document = parse_document('<?xml version="1.0"?><a><b> x </b></a>')
        trimmed = trim_whitespace(document.root.children[0])

        assert document.root.child_elements()[0].text == "x "
        assert trimmed.as_element().text == "x"
