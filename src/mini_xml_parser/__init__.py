"""Mini XML Parser.

A strict recursive-descent parser for a small subset of XML: elements,
quoted attributes, text, CDATA sections, the ``<?xml ...?>`` prolog and a
skipped doctype declaration. Malformed input is rejected, never repaired.

Progressive API Disclosure:
- Level 1: Simple functions - parse_element(), parse_document()
- Level 2: Configured session - MiniXMLParser class with diagnose()
- Level 3: Grammar rules - mini_xml_parser.grammar.Parser
"""

__version__ = "0.1.0"
__author__ = "Mini XML Parser Team"

# Progressive API disclosure - Level 1 and Level 2
from .api import MiniXMLParser, ParseOutcome, parse_document, parse_element

# Level 3: grammar rules and their failure types
from .grammar import FailureKind, FatalParseError, GrammarError, NoMatch, Parser

# Configuration for parsing sessions
from .shared.config import ParserConfig

# Tree types, normalization and queries
from .tree import (
    Document,
    Element,
    Node,
    NodeKind,
    elem_name,
    first,
    last,
    nth,
    only,
    trim_whitespace,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_element",
    "parse_document",

    # Level 2: Configured session
    "MiniXMLParser",
    "ParseOutcome",
    "ParserConfig",

    # Level 3: Grammar
    "Parser",
    "FailureKind",
    "GrammarError",
    "NoMatch",
    "FatalParseError",

    # Tree
    "Document",
    "Element",
    "Node",
    "NodeKind",
    "trim_whitespace",
    "elem_name",
    "first",
    "last",
    "nth",
    "only",
]
