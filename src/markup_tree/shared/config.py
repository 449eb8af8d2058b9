"""Configuration for the markup-to-tree pipeline.

This module provides an immutable configuration object that controls the
optional behaviour around the core lexer and tree builder: the name of the
synthetic root, which tolerated irregularities are reported as diagnostics,
the encoding used for byte input, and the logging level.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None):
        super().__init__(message)
        self.field_name = field_name
        self.value = value


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for tokenization, tree building and the API layer.

    Thread-safe due to frozen dataclass implementation. Use ``override`` to
    derive a modified copy.
    """

    root_name: str = "document"
    report_mismatched_end_tags: bool = True
    report_unterminated_tags: bool = True
    encoding: str = "utf-8"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.root_name, str) or not self.root_name:
            raise ConfigValidationError(
                "root_name must be a non-empty string", "root_name", self.root_name
            )
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ConfigValidationError(
                "encoding must be a non-empty string", "encoding", self.encoding
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}",
                "log_level",
                self.log_level,
            )
        for flag in ("report_mismatched_end_tags", "report_unterminated_tags"):
            value = getattr(self, flag)
            if not isinstance(value, bool):
                raise ConfigValidationError(f"{flag} must be a boolean", flag, value)

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> config.override(root_name="root").root_name
            'root'
        """
        unknown = sorted(set(kwargs) - self.field_names())
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                unknown[0],
            )
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: If ``data`` is not a mapping, contains
                unknown keys, or holds invalid values
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")

        unknown = sorted(set(data) - cls.field_names())
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                unknown[0],
            )
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigError: If the file cannot be read
            ConfigValidationError: If its content is invalid
        """
        config_path = Path(path)
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def quiet(cls) -> "ParserConfig":
        """Create configuration reporting only stray end tags and unclosed elements."""
        return cls(
            report_mismatched_end_tags=False,
            report_unterminated_tags=False,
            log_level="ERROR",
        )

    @classmethod
    def verbose(cls) -> "ParserConfig":
        """Create configuration with every diagnostic and debug logging."""
        return cls(log_level="DEBUG")

    def validate_compatibility(self, other: "ParserConfig") -> List[str]:
        """Check compatibility with another configuration.

        Returns:
            List of differences that change the produced tree or diagnostics
        """
        warnings = []

        if self.root_name != other.root_name:
            warnings.append(
                f"Root name differs: {self.root_name!r} vs {other.root_name!r}"
            )
        if self.report_mismatched_end_tags != other.report_mismatched_end_tags:
            warnings.append("Mismatched end tag reporting differs")
        if self.report_unterminated_tags != other.report_unterminated_tags:
            warnings.append("Unterminated tag reporting differs")

        return warnings
