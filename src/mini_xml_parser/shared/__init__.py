"""Shared utilities for mini XML parsing.

This module provides the configuration object, result and diagnostic types,
and the logging helpers used across the grammar, tree and API layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
)
from .config import (
    HTML_VOID_ELEMENTS,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseMetrics",
    "HTML_VOID_ELEMENTS",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "get_logger",
]
