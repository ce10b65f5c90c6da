"""JSON schema validation and YAML configuration loader for overlay charts.

This module provides:
- JSON schema definition for validating overlay configuration files
- Configuration loading with environment variable substitution
- Validation error reporting with line numbers
- Schema versioning support
"""

import os
import re
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from jsonschema import Draft7Validator

# registers the built-in indicators
import advisor_chart.indicators  # noqa: F401
from advisor_chart.core.registry import RegistrationError, resolve_params

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigValidationError",
    "load_config",
    "validate_config",
    "get_schema",
    "get_schema_version",
]

_WINDOW = {"type": "integer", "minimum": 1}

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Advisor Chart Overlay Configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "version": {
            "type": "string",
            "description": "Schema version for compatibility checking",
            "pattern": r"^\d+\.\d+(\.\d+)?$",
            "default": "1.0",
        },
        "name": {
            "type": "string",
            "description": "Human-readable chart name",
            "minLength": 1,
            "maxLength": 100,
        },
        "canvas": {
            "type": "object",
            "description": "Logical canvas the coordinates are expressed in",
            "additionalProperties": False,
            "properties": {
                "width": {"type": "number", "exclusiveMinimum": 0, "default": 760},
                "height": {"type": "number", "exclusiveMinimum": 0, "default": 220},
            },
        },
        "windows": {
            "type": "object",
            "description": "Window lengths of the overlays, in sessions",
            "additionalProperties": False,
            "properties": {
                "fast": dict(_WINDOW, default=20),
                "slow": dict(_WINDOW, default=50),
                "bollinger": dict(_WINDOW, default=20),
            },
        },
        "band_multiplier": {
            "type": "number",
            "description": "Standard deviations between the band middle and its edges",
            "minimum": 0,
            "default": 2,
        },
        "visible": {
            "type": "object",
            "description": "Which overlays are drawn",
            "additionalProperties": False,
            "properties": {
                "price": {"type": "boolean", "default": True},
                "fast": {"type": "boolean", "default": True},
                "slow": {"type": "boolean", "default": True},
                "bollinger": {"type": "boolean", "default": True},
                "signals": {"type": "boolean", "default": True},
            },
        },
        "theme": {
            "type": "string",
            "description": "Theme name used by the renderers",
            "minLength": 1,
            "default": "default",
        },
        "indicators": {
            "type": "array",
            "description": "Extra registered indicators added to the indicator table",
            "items": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"type": "string", "pattern": r"^[A-Z][A-Z0-9_]*$"},
                },
                "additionalProperties": {"type": ["number", "string", "boolean"]},
            },
            "default": [],
        },
    },
}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        self.message = message
        self.line_number = line_number
        self.yaml_path = yaml_path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with line number and path if available."""
        parts = []
        if self.yaml_path:
            parts.append(f"File: {self.yaml_path}")
        if self.line_number is not None:
            parts.append(f"Line {self.line_number}")
        if parts:
            return f"{' | '.join(parts)}: {self.message}"
        return self.message


def _substitute_env_vars(content: str) -> str:
    """Substitute environment variables in ${VAR} format.

    Raises:
        ConfigValidationError: If a referenced environment variable is missing
    """

    def replace_var(match):
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigValidationError(
                f"Environment variable '${{{var_name}}}' is not set"
            )
        return value

    return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", replace_var, content)


def _schema_errors(config: dict[str, Any]) -> list[str]:
    validator = Draft7Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(config), key=lambda e: list(e.absolute_path))
    messages = []
    for error in errors:
        path = (
            " -> ".join(str(p) for p in error.absolute_path)
            if error.absolute_path
            else "root"
        )
        messages.append(f"  {path}: {error.message}")
    return messages


def _validate_business_logic(config: dict[str, Any]) -> None:
    """Validate constraints the JSON schema cannot express.

    Raises:
        ConfigValidationError: If the fast window is not shorter than the slow
            one, or an indicator entry names an unregistered indicator or a
            parameter it does not take
    """
    windows = config.get("windows") or {}
    fast = windows.get("fast")
    slow = windows.get("slow")
    if fast is not None and slow is not None and fast >= slow:
        raise ConfigValidationError(
            f"Fast window ({fast}) must be shorter than the slow window ({slow})"
        )

    for i, entry in enumerate(config.get("indicators") or []):
        params = {key: value for key, value in entry.items() if key != "type"}
        try:
            resolve_params(entry["type"], params)
        except RegistrationError as e:
            raise ConfigValidationError(f"indicators -> {i}: {e}") from e


def load_config(config_path: Union[str, Path]) -> dict[str, Any]:
    """Load and validate a YAML overlay configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigValidationError: If the file cannot be parsed or validation fails
        FileNotFoundError: If the configuration file doesn't exist
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            content = f.read()

        content = _substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            raise ConfigValidationError(
                f"YAML parsing error: {e}",
                line_number=mark.line + 1 if mark else None,
                yaml_path=str(config_path),
            ) from e

        if config is None:
            raise ConfigValidationError(
                "Configuration file is empty", yaml_path=str(config_path)
            )

        if not isinstance(config, dict):
            raise ConfigValidationError(
                "Configuration must be a YAML object/dictionary",
                yaml_path=str(config_path),
            )

        messages = _schema_errors(config)
        if messages:
            raise ConfigValidationError(
                "Schema validation failed:\n" + "\n".join(messages),
                yaml_path=str(config_path),
            )

        _validate_business_logic(config)
        return config

    except ConfigValidationError as e:
        if e.yaml_path is None:
            raise ConfigValidationError(
                e.message, line_number=e.line_number, yaml_path=str(config_path)
            ) from e
        raise
    except OSError as e:
        raise ConfigValidationError(
            f"Could not read configuration: {e}", yaml_path=str(config_path)
        ) from e


def validate_config(config: dict[str, Any]) -> None:
    """Validate an already-loaded configuration dictionary.

    Raises:
        ConfigValidationError: If validation fails
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration must be a dictionary")

    messages = _schema_errors(config)
    if messages:
        raise ConfigValidationError(
            "Schema validation failed:\n" + "\n".join(messages)
        )

    _validate_business_logic(config)


def get_schema_version() -> str:
    """Get the current schema version."""
    return CONFIG_SCHEMA["properties"]["version"]["default"]


def get_schema() -> dict[str, Any]:
    """Get a copy of the current JSON schema."""
    return deepcopy(CONFIG_SCHEMA)
