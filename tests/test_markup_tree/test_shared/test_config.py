"""Comprehensive tests for configuration system."""

import json
from dataclasses import FrozenInstanceError

import pytest

from markup_tree.shared.config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self):
        """Test default configuration values."""
        config = ParserConfig()

        assert config.root_name == "document"
        assert config.report_mismatched_end_tags is True
        assert config.report_unterminated_tags is True
        assert config.encoding == "utf-8"
        assert config.log_level == "WARNING"

    def test_configuration_is_frozen(self):
        """Test configuration cannot be mutated in place."""
        config = ParserConfig()

        with pytest.raises(FrozenInstanceError):
            config.root_name = "other"  # type: ignore

    def test_empty_root_name_rejected(self):
        """Test empty root name raises a validation error."""
        with pytest.raises(ConfigValidationError, match="root_name") as exc_info:
            ParserConfig(root_name="")

        assert exc_info.value.field_name == "root_name"
        assert exc_info.value.value == ""

    def test_invalid_log_level_rejected(self):
        """Test unknown log level raises a validation error."""
        with pytest.raises(ConfigValidationError, match="log_level"):
            ParserConfig(log_level="LOUD")

    def test_non_boolean_flag_rejected(self):
        """Test reporting flags must be booleans."""
        with pytest.raises(ConfigValidationError, match="report_unterminated_tags"):
            ParserConfig(report_unterminated_tags="yes")  # type: ignore

    def test_empty_encoding_rejected(self):
        """Test empty encoding raises a validation error."""
        with pytest.raises(ConfigValidationError, match="encoding"):
            ParserConfig(encoding="")

    def test_validation_error_is_config_error(self):
        """Test exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)

    def test_override(self):
        """Test override returns a modified copy."""
        config = ParserConfig()
        new_config = config.override(root_name="root", log_level="DEBUG")

        assert new_config.root_name == "root"
        assert new_config.log_level == "DEBUG"
        assert config.root_name == "document"

    def test_override_unknown_field(self):
        """Test override rejects unknown fields."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration field"):
            ParserConfig().override(strict=True)

    def test_override_still_validates(self):
        """Test overridden values are validated."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(root_name="")

    def test_dict_round_trip(self):
        """Test to_dict / from_dict."""
        config = ParserConfig(root_name="root", report_mismatched_end_tags=False)
        data = config.to_dict()

        assert data == {
            "root_name": "root",
            "report_mismatched_end_tags": False,
            "report_unterminated_tags": True,
            "encoding": "utf-8",
            "log_level": "WARNING",
        }
        assert ParserConfig.from_dict(data) == config

    def test_from_dict_partial(self):
        """Test missing keys fall back to defaults."""
        config = ParserConfig.from_dict({"log_level": "INFO"})

        assert config.log_level == "INFO"
        assert config.root_name == "document"

    def test_from_dict_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig.from_dict({"strict_matching": True})

        assert exc_info.value.field_name == "strict_matching"

    def test_from_dict_requires_mapping(self):
        """Test non-mapping input is rejected."""
        with pytest.raises(ConfigValidationError, match="mapping"):
            ParserConfig.from_dict(["root_name"])  # type: ignore

    def test_json_round_trip(self):
        """Test to_json / from_json."""
        config = ParserConfig(encoding="latin-1")

        assert json.loads(config.to_json())["encoding"] == "latin-1"
        assert ParserConfig.from_json(config.to_json()) == config

    def test_from_json_invalid(self):
        """Test malformed JSON is reported as a validation error."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")

    def test_from_file(self, tmp_path):
        """Test loading configuration from a JSON file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"root_name": "body"}))

        assert ParserConfig.from_file(path).root_name == "body"

    def test_from_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Could not read config file"):
            ParserConfig.from_file(tmp_path / "missing.json")

    def test_presets(self):
        """Test preset factory methods."""
        quiet = ParserConfig.quiet()
        assert quiet.report_mismatched_end_tags is False
        assert quiet.report_unterminated_tags is False
        assert quiet.log_level == "ERROR"

        verbose = ParserConfig.verbose()
        assert verbose.report_mismatched_end_tags is True
        assert verbose.log_level == "DEBUG"

    def test_validate_compatibility(self):
        """Test compatibility check lists differences."""
        base = ParserConfig()

        assert base.validate_compatibility(ParserConfig()) == []
        warnings = base.validate_compatibility(ParserConfig.quiet())
        assert len(warnings) == 2
        assert any("Mismatched" in warning for warning in warnings)
        assert len(base.validate_compatibility(base.override(root_name="r"))) == 1
