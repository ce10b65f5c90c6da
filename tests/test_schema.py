"""Tests for schema validation and configuration loading."""

import os
import tempfile
from pathlib import Path

import pytest
import yaml

from advisor_chart.core.schema import (
    ConfigValidationError,
    get_schema,
    get_schema_version,
    load_config,
    validate_config,
)

CONFIG_DIR = Path(__file__).parent.parent / "config"


@pytest.fixture
def valid_config():
    """Valid configuration dictionary for testing."""
    return {
        "version": "1.0",
        "name": "Test chart",
        "canvas": {"width": 760, "height": 220},
        "windows": {"fast": 20, "slow": 50, "bollinger": 20},
        "band_multiplier": 2,
        "visible": {
            "price": True,
            "fast": True,
            "slow": True,
            "bollinger": True,
            "signals": True,
        },
        "theme": "default",
    }


@pytest.fixture
def temp_yaml_file():
    """Create a temporary YAML file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yield f.name
    try:
        os.unlink(f.name)
    except FileNotFoundError:
        pass


class TestSchemaValidation:
    """Test JSON schema validation of overlay configurations."""

    def test_valid_config_passes_validation(self, valid_config):
        validate_config(valid_config)

    def test_empty_config_is_valid(self):
        """Every key is optional."""
        validate_config({})

    def test_unknown_top_level_key_fails(self, valid_config):
        valid_config["symbol"] = "BTC-USD"

        with pytest.raises(ConfigValidationError, match="symbol"):
            validate_config(valid_config)

    def test_unknown_window_fails(self, valid_config):
        valid_config["windows"]["medium"] = 30

        with pytest.raises(ConfigValidationError, match="medium"):
            validate_config(valid_config)

    @pytest.mark.parametrize("value", [0, -5, 2.5, "20"])
    def test_invalid_window_fails(self, valid_config, value):
        valid_config["windows"]["bollinger"] = value

        with pytest.raises(ConfigValidationError, match="bollinger"):
            validate_config(valid_config)

    def test_negative_band_multiplier_fails(self, valid_config):
        valid_config["band_multiplier"] = -1

        with pytest.raises(ConfigValidationError, match="band_multiplier"):
            validate_config(valid_config)

    def test_zero_band_multiplier_allowed(self, valid_config):
        valid_config["band_multiplier"] = 0
        validate_config(valid_config)

    @pytest.mark.parametrize("dimension", ["width", "height"])
    def test_non_positive_canvas_fails(self, valid_config, dimension):
        valid_config["canvas"][dimension] = 0

        with pytest.raises(ConfigValidationError, match=dimension):
            validate_config(valid_config)

    def test_visibility_must_be_boolean(self, valid_config):
        valid_config["visible"]["signals"] = "yes"

        with pytest.raises(ConfigValidationError, match="signals"):
            validate_config(valid_config)

    def test_invalid_version_format_fails(self, valid_config):
        valid_config["version"] = "v1"

        with pytest.raises(ConfigValidationError, match="version"):
            validate_config(valid_config)

    def test_fast_not_shorter_than_slow_fails(self, valid_config):
        valid_config["windows"]["fast"] = 50

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(valid_config)

        assert "Fast window (50) must be shorter than the slow window (50)" in str(exc_info.value)

    def test_fast_alone_is_not_compared(self, valid_config):
        valid_config["windows"] = {"fast": 80}
        validate_config(valid_config)

    def test_non_dict_fails(self):
        with pytest.raises(ConfigValidationError, match="dictionary"):
            validate_config(["windows"])

    def test_registered_indicators_allowed(self, valid_config):
        valid_config["indicators"] = [
            {"type": "SMA", "length": 100},
            {"type": "BBANDS", "length": 30, "k": 2.5},
        ]
        validate_config(valid_config)

    def test_indicator_without_type_fails(self, valid_config):
        valid_config["indicators"] = [{"length": 100}]

        with pytest.raises(ConfigValidationError, match="type"):
            validate_config(valid_config)

    def test_unregistered_indicator_fails(self, valid_config):
        valid_config["indicators"] = [{"type": "RSI", "length": 14}]

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(valid_config)

        message = str(exc_info.value)
        assert "indicators -> 0" in message
        assert "No class registered under name 'RSI'" in message

    def test_unknown_indicator_parameter_fails(self, valid_config):
        valid_config["indicators"] = [{"type": "SMA", "window": 100}]

        with pytest.raises(ConfigValidationError, match="Unknown parameters \\['window'\\]"):
            validate_config(valid_config)


class TestConfigLoading:
    """Test YAML configuration file loading."""

    def test_load_valid_config_file(self, valid_config, temp_yaml_file):
        with open(temp_yaml_file, "w") as f:
            yaml.dump(valid_config, f)

        loaded_config = load_config(temp_yaml_file)

        assert loaded_config == valid_config

    def test_load_nonexistent_file_raises_filenotfound(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path.yaml")

    def test_load_empty_file_fails(self, temp_yaml_file):
        with open(temp_yaml_file, "w") as f:
            f.write("")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        assert "empty" in str(exc_info.value).lower()

    def test_load_invalid_yaml_fails_with_line_number(self, temp_yaml_file):
        with open(temp_yaml_file, "w") as f:
            f.write("name: Test\n")
            f.write("windows: [\n")  # unclosed bracket on line 2
            f.write("theme: dark\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        error_msg = str(exc_info.value)
        assert "line" in error_msg.lower()
        assert temp_yaml_file in error_msg

    def test_load_non_dict_yaml_fails(self, temp_yaml_file):
        with open(temp_yaml_file, "w") as f:
            f.write("- fast\n- slow\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        assert "dictionary" in str(exc_info.value).lower()

    def test_schema_error_includes_file_and_path(self, valid_config, temp_yaml_file):
        valid_config["canvas"]["height"] = -10
        with open(temp_yaml_file, "w") as f:
            yaml.dump(valid_config, f)

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        error_msg = str(exc_info.value)
        assert temp_yaml_file in error_msg
        assert "canvas -> height" in error_msg

    def test_business_rule_error_includes_file(self, valid_config, temp_yaml_file):
        valid_config["windows"]["fast"] = 60
        with open(temp_yaml_file, "w") as f:
            yaml.dump(valid_config, f)

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        assert exc_info.value.yaml_path == temp_yaml_file

    @pytest.mark.parametrize("name", ["crypto_advisor.yaml", "stock_advisor.yaml"])
    def test_bundled_configs_are_valid(self, name):
        config = load_config(CONFIG_DIR / name)
        assert config["version"] == get_schema_version()


class TestEnvironmentVariableSubstitution:
    """Test environment variable substitution functionality."""

    def test_env_var_substitution(self, temp_yaml_file):
        os.environ["ADVISOR_FAST_WINDOW"] = "12"

        try:
            with open(temp_yaml_file, "w") as f:
                f.write("windows:\n  fast: ${ADVISOR_FAST_WINDOW}\n  slow: 40\n")

            loaded_config = load_config(temp_yaml_file)
            assert loaded_config["windows"]["fast"] == 12

        finally:
            del os.environ["ADVISOR_FAST_WINDOW"]

    def test_missing_env_var_fails(self, temp_yaml_file):
        if "MISSING_VAR" in os.environ:
            del os.environ["MISSING_VAR"]

        with open(temp_yaml_file, "w") as f:
            f.write("theme: ${MISSING_VAR}\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(temp_yaml_file)

        assert "MISSING_VAR" in str(exc_info.value)
        assert "not set" in str(exc_info.value)

    def test_multiple_env_vars_in_string(self, temp_yaml_file, monkeypatch):
        monkeypatch.setenv("CHART_DESK", "Crypto")
        monkeypatch.setenv("CHART_KIND", "advisor")

        with open(temp_yaml_file, "w") as f:
            f.write('name: "${CHART_DESK} ${CHART_KIND}"\n')

        assert load_config(temp_yaml_file)["name"] == "Crypto advisor"


class TestSchemaUtilities:
    """Test schema utility functions."""

    def test_get_schema_version(self):
        version = get_schema_version()
        assert isinstance(version, str)
        assert version == "1.0"

    def test_get_schema(self):
        schema = get_schema()
        assert isinstance(schema, dict)
        assert "$schema" in schema
        assert "properties" in schema

        # modifying the copy leaves the original alone
        original_title = schema.get("title")
        schema["title"] = "Modified"
        assert get_schema()["title"] == original_title

    def test_multiple_validation_errors_listed(self, valid_config):
        valid_config["canvas"]["width"] = -1
        valid_config["windows"]["slow"] = 0
        valid_config["theme"] = ""

        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(valid_config)

        error_msg = str(exc_info.value)
        assert "width" in error_msg
        assert "slow" in error_msg
        assert "theme" in error_msg
