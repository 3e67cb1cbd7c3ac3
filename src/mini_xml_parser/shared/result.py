"""Diagnostic and metric types shared by the parsing layers.

These objects describe what happened during a parse (timing, how much input
was consumed, why a parse was rejected) without being part of the tree.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Parse rejected by a soft failure or leftover input
    CRITICAL = auto()   # Parse aborted by a fatal failure


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def is_error(self) -> bool:
        """Check if this entry reports a rejected parse."""
        return self.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)


@dataclass
class ParseMetrics:
    """Size and timing figures for a single parse."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    characters_consumed: int = 0
    element_count: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def consumed_ratio(self) -> float:
        """Fraction of the input consumed by the grammar."""
        if self.characters_processed == 0:
            return 0.0
        return self.characters_consumed / self.characters_processed
