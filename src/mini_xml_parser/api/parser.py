"""Parser API with progressive disclosure for mini XML parsing.

Level 1 is a pair of module functions returning the normalized tree or None.
Level 2 is ``MiniXMLParser``, a reusable session that also explains rejected
input through ``diagnose``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from mini_xml_parser.grammar import (
    Cursor,
    FailureKind,
    GrammarError,
    Parser,
)
from mini_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
    ParserConfig,
    get_logger,
)
from mini_xml_parser.tree import Document, Element, iter_elements

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion

ParsedValue = Union[Element, Document]


def _preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text


def _count_elements(value: Optional[ParsedValue]) -> int:
    if value is None:
        return 0
    root = value.root if isinstance(value, Document) else value
    return sum(1 for _ in iter_elements([root]))


@dataclass
class ParseOutcome:
    """Result of ``MiniXMLParser.diagnose``.

    Unlike the full-consumption functions, an outcome keeps the reason a
    parse was rejected: the failure kind, where it happened and the input
    left at that point.
    """

    value: Optional[ParsedValue] = None
    failure_kind: Optional[FailureKind] = None
    remaining: str = ""
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.value is not None and self.failure_kind is None

    @property
    def is_fatal(self) -> bool:
        return self.failure_kind is not None and self.failure_kind.is_fatal

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to the outcome."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def has_errors(self) -> bool:
        return any(diagnostic.is_error for diagnostic in self.diagnostics)


def parse_element(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[Element]:
    """Parse a complete element and strip whitespace-only text.

    Args:
        text: Markup that must consist of exactly one element
        config: Session configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for log records

    Returns:
        The root element, or None if the markup is malformed or input is
        left over after the element.

    Examples:
        >>> element = parse_element('<a x="1"><b>hi</b><b>bye</b></a>')
        >>> [child.name for child in element.child_elements()]
        ['b', 'b']
        >>> parse_element('<a><b></a>') is None
        True
    """
    return MiniXMLParser(config, correlation_id).parse_element(text)


def parse_document(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Optional[Document]:
    """Parse a complete document (prolog plus root element).

    Examples:
        >>> document = parse_document('<?xml version="1.0" encoding="utf-8"?><root/>')
        >>> document.version, document.encoding, document.root.name
        (0, 'utf-8', 'root')
    """
    return MiniXMLParser(config, correlation_id).parse_document(text)


class MiniXMLParser:
    """Reusable parsing session bound to one configuration.

    Attributes:
        config: Current session configuration
        correlation_id: Correlation ID for log records

    Examples:
        >>> parser = MiniXMLParser(ParserConfig.html())
        >>> element = parser.parse_element('<p>line<br>next</p>')
        >>> [child.kind.name for child in element.children]
        ['CHAR_DATA', 'ELEMENT', 'CHAR_DATA']
        >>> outcome = parser.diagnose('<img src="x.png">rest')
        >>> outcome.failure_kind.name, outcome.remaining
        ('TRAILING_INPUT', 'rest')
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "mini_xml_parser")
        self._grammar = Parser(self.config.self_closing_tags, self.correlation_id)

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def _record(self, success: bool, processing_time: float) -> None:
        self._parse_count += 1
        self._total_processing_time += processing_time
        if success:
            self._successful_parses += 1

    def _log_start(self, operation: str, text: str) -> None:
        if not self.logger.is_enabled_for(logging.DEBUG):
            return
        self.logger.debug(
            f"Starting {operation} parse",
            extra={
                "content_length": len(text),
                "preview": _preview(text),
                "parse_count": self._parse_count + 1,
            }
        )

    def _log_done(self, operation: str, success: bool, processing_time: float) -> None:
        self.logger.info(
            f"{operation.capitalize()} parse completed",
            extra={
                "success": success,
                "processing_time_ms": processing_time,
                "total_parses": self._parse_count,
            }
        )

    def parse_element(self, text: str) -> Optional[Element]:
        """Full-consumption element parse; None on any failure."""
        start_time = time.time()
        self._log_start("element", text)

        element = self._grammar.complete_element(text)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._record(element is not None, processing_time)
        self._log_done("element", element is not None, processing_time)
        return element

    def parse_document(self, text: str) -> Optional[Document]:
        """Full-consumption document parse; None on any failure."""
        start_time = time.time()
        self._log_start("document", text)

        document = self._grammar.complete_document(text)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._record(document is not None, processing_time)
        self._log_done("document", document is not None, processing_time)
        return document

    def diagnose(self, text: str, as_document: bool = False) -> ParseOutcome:
        """Parse like ``parse_element``/``parse_document`` but explain failures.

        On success the value is normalized exactly as the full-consumption
        functions do it. Soft failures are reported with ERROR severity,
        fatal failures with CRITICAL, and leftover input as
        ``FailureKind.TRAILING_INPUT``.
        """
        start_time = time.time()
        operation = "document" if as_document else "element"
        self._log_start(operation, text)

        outcome = ParseOutcome(correlation_id=self.correlation_id)
        outcome.metrics.characters_processed = len(text)

        try:
            if as_document:
                cursor, value = self._grammar.document(text)
            else:
                cursor, value = self._grammar.element(text)
        except GrammarError as e:
            outcome.failure_kind = e.kind
            outcome.remaining = e.remaining
            outcome.metrics.characters_consumed = e.offset
            outcome.add_diagnostic(
                DiagnosticSeverity.CRITICAL if e.is_fatal else DiagnosticSeverity.ERROR,
                e.message,
                "grammar",
                position={"offset": e.offset},
                details={"failure_kind": e.kind.name},
            )
        else:
            self._finish(outcome, cursor, value)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        outcome.metrics.processing_time_ms = processing_time
        self._record(outcome.success, processing_time)
        self._log_done(operation, outcome.success, processing_time)
        return outcome

    def _finish(self, outcome: ParseOutcome, cursor: Cursor, value: ParsedValue) -> None:
        outcome.metrics.characters_consumed = cursor.offset
        if not cursor.at_end:
            outcome.failure_kind = FailureKind.TRAILING_INPUT
            outcome.remaining = cursor.remaining
            outcome.add_diagnostic(
                DiagnosticSeverity.ERROR,
                "Input left over after a complete parse",
                "api_parser",
                position={"offset": cursor.offset},
                details={"failure_kind": FailureKind.TRAILING_INPUT.name},
            )
            return

        root = value.root if isinstance(value, Document) else value
        root.strip_whitespace()
        outcome.value = value
        outcome.metrics.element_count = _count_elements(value)

    def reconfigure(self, config: ParserConfig) -> None:
        """Switch to a new configuration for subsequent parses."""
        self.config = config
        self.correlation_id = config.correlation_id or self.correlation_id
        self.logger = self.logger.bind(self.correlation_id)
        self._grammar = Parser(config.self_closing_tags, self.correlation_id)
        self.logger.info(
            "Parser reconfigured",
            extra={"self_closing_tags": sorted(config.self_closing_tags)}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
        self.logger.info("Parser statistics reset")
