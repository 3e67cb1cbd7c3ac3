"""Public parsing API and integration adapters."""

from .adapters import (
    AdapterMetadata,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .parser import (
    MiniXMLParser,
    ParseOutcome,
    parse_document,
    parse_element,
)

__all__ = [
    "AdapterMetadata",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "MiniXMLParser",
    "ParseOutcome",
    "get_adapter",
    "list_available_adapters",
    "parse_document",
    "parse_element",
    "register_adapter",
]
