"""Integration adapters for exchanging trees with other XML libraries.

Each adapter converts a parsed ``Element``/``Document`` into the target
library's element type, and converts a foreign element back by serializing it
and running it through ``parse_element``. Character data maps onto the
ElementTree ``text``/``tail`` model; doctype sentinels have no counterpart
and are skipped.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, Union

from mini_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)
from mini_xml_parser.tree import Document, Element

from .parser import parse_element

Tree = Union[Element, Document]


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str
    supported_versions: List[str] = field(default_factory=list)


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def _build_target(element: Element, make_element: Callable[[str, Dict[str, str]], Any]) -> Any:
    """Recursively rebuild ``element`` with an ElementTree-style factory."""
    target = make_element(element.name, dict(element.attributes))
    last_child = None
    for child in element.children:
        if child.is_char_data():
            text = child.as_char_data()
            if last_child is None:
                target.text = (target.text or "") + text
            else:
                last_child.tail = (last_child.tail or "") + text
            continue
        child_element = child.as_element()
        if child_element.is_doctype:
            continue
        last_child = _build_target(child_element, make_element)
        target.append(last_child)
    return target


class IntegrationAdapter(ABC):
    """Base class for bidirectional conversion with an XML library."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the integration adapter.

        Args:
            config: Configuration used when parsing foreign elements back
            correlation_id: Optional correlation ID for log records
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self._logger = get_logger(__name__, self.correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _etree(self) -> Any:
        """Return the target library's etree module."""

    @abstractmethod
    def _serialize(self, target_data: Any) -> str:
        """Serialize a foreign element to markup, without its tail."""

    def to_target(self, tree: Tree) -> ConversionResult:
        """Convert a parsed element or document to the target element type."""
        start_time = time.time()
        try:
            etree = self._etree()
            root = tree.root if isinstance(tree, Document) else tree
            if root.is_doctype:
                return self._create_error_result(
                    "A doctype sentinel cannot be converted", tree,
                    (time.time() - start_time) * 1000
                )
            converted = _build_target(root, etree.Element)
            processing_time = (time.time() - start_time) * 1000
            return ConversionResult(
                success=True,
                converted_data=converted,
                original_data=tree,
                conversion_time_ms=processing_time,
                metadata={"element_count": sum(1 for _ in converted.iter())},
            )
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                tree,
                (time.time() - start_time) * 1000,
                exc_info=True
            )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a foreign element to a parsed ``Element``."""
        start_time = time.time()
        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                (time.time() - start_time) * 1000
            )
        try:
            markup = self._serialize(target_data)
        except Exception as e:
            return self._create_error_result(
                f"Failed to serialize {self.metadata.target_library} element: {e}",
                target_data,
                (time.time() - start_time) * 1000
            )

        element = parse_element(markup, self.config, self.correlation_id)
        processing_time = (time.time() - start_time) * 1000
        if element is None:
            return self._create_error_result(
                "Serialized element is outside the accepted XML subset",
                target_data,
                processing_time
            )
        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=target_data,
            conversion_time_ms=processing_time,
            metadata={"original_tag": target_data.tag, "xml_length": len(markup)},
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0,
        exc_info: bool = False
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message, exc_info=exc_info)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree.

    lxml rejects ':' in tag names without a namespace map, so prefixed names
    fail to convert.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between parsed trees and lxml.etree",
            supported_versions=["4.0+"],
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _etree(self) -> Any:
        import lxml.etree
        return lxml.etree

    def _serialize(self, target_data: Any) -> str:
        import lxml.etree
        return lxml.etree.tostring(target_data, encoding="unicode", with_tail=False)


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between parsed trees and ElementTree",
            supported_versions=["3.8+"],
        )

    def is_available(self) -> bool:
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET

    def _serialize(self, target_data: Any) -> str:
        import xml.etree.ElementTree as ET
        tail, target_data.tail = target_data.tail, None
        try:
            return ET.tostring(target_data, encoding="unicode")
        finally:
            target_data.tail = tail


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "lxml": LxmlAdapter,
    "elementtree": ElementTreeAdapter,
}


def register_adapter(name: str, adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an adapter class under ``name``."""
    _ADAPTERS[name] = adapter_class


def get_adapter(
    name: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name, or None if unknown or unavailable."""
    adapter_class = _ADAPTERS.get(name)
    if adapter_class is None:
        return None
    adapter = adapter_class(config, correlation_id)
    return adapter if adapter.is_available() else None


def list_available_adapters() -> List[AdapterMetadata]:
    """Metadata of every registered adapter whose library can be imported."""
    available = []
    for adapter_class in _ADAPTERS.values():
        adapter = adapter_class()
        if adapter.is_available():
            available.append(adapter.metadata)
    return available
