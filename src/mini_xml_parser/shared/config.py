"""Configuration for mini XML parsing sessions.

A parsing session is configured by a single immutable ``ParserConfig``. Its
only grammar-relevant value is the set of tag names allowed to close without
a slash (``<img src="x.png">``); the rest is metadata used for logging.
"""

import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

# Names the grammar can produce: ASCII letters and ':'
_TAG_NAME_PATTERN = re.compile(r"[A-Za-z:]+")

# HTML void elements expressible with the accepted name characters
HTML_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _normalize_tag_names(names: Iterable[str]) -> FrozenSet[str]:
    if isinstance(names, str):
        raise ConfigValidationError(
            "self_closing_tags must be a collection of names, not a string",
            field_name="self_closing_tags",
            suggestions=[f"Use [{names!r}]"],
        )

    normalized = set()
    for name in names:
        if not isinstance(name, str) or not _TAG_NAME_PATTERN.fullmatch(name):
            raise ConfigValidationError(
                f"Invalid self-closing tag name: {name!r}",
                field_name="self_closing_tags",
                suggestions=["Tag names may only contain ASCII letters and ':'"],
            )
        normalized.add(name.lower())
    return frozenset(normalized)


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration for one parsing session.

    Attributes:
        self_closing_tags: Tag names that may close with a bare ``>``.
            Stored lower-cased, since the grammar lower-cases tag names.
        correlation_id: Optional ID attached to every log record.
        name: Optional preset name.
        description: Optional human-readable description.
    """

    self_closing_tags: FrozenSet[str] = field(default_factory=frozenset)
    correlation_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize and validate the configuration."""
        # frozen dataclass: normalized value is written through object.__setattr__
        object.__setattr__(
            self, "self_closing_tags", _normalize_tag_names(self.self_closing_tags)
        )
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string or None", field_name="correlation_id"
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig.html()
            >>> config.override(correlation_id="batch-7").self_closing_tags == config.self_closing_tags
            True
        """
        unknown = set(kwargs) - set(self.__dataclass_fields__)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(sorted(unknown))}"
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        return {
            "self_closing_tags": sorted(self.self_closing_tags),
            "correlation_id": self.correlation_id,
            "name": self.name,
            "description": self.description,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a dictionary")

        field_values = {
            key: value for key, value in data.items()
            if key in cls.__dataclass_fields__
        }
        if "self_closing_tags" in field_values:
            field_values["self_closing_tags"] = _normalize_tag_names(
                field_values["self_closing_tags"] or ()
            )
        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Every element must close with ``/>`` or a matching end tag."""
        return cls(
            name="strict",
            description="No element may close without a slash",
        )

    @classmethod
    def html(cls) -> "ParserConfig":
        """HTML void elements may close with a bare ``>``."""
        return cls(
            self_closing_tags=HTML_VOID_ELEMENTS,
            name="html",
            description="HTML void elements may omit the closing slash",
        )
