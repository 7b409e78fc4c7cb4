"""Configuration loading and validation.

Settings come from a YAML file validated against ``CONFIG_SCHEMA``. Provider
API keys can also be supplied through environment variables, which take
precedence over the file.
"""

import copy
import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "CRYPTO_INSIGHT_CONFIG"

# Environment variable -> dot-notation config key
ENV_OVERRIDES = {
    "COINMARKETCAP_API_KEY": "coinmarketcap.api_key",
    "OPENAI_API_KEY": "openai.api_key",
    "GEMINI_API_KEY": "gemini.api_key",
}

DEFAULTS: Dict[str, Any] = {
    "server": {"host": "0.0.0.0", "port": 5000, "debug": False},
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    },
    "cors": {"allowed_origins": ["http://localhost:3000"]},
    "http": {"timeout_seconds": 30},
    "coinmarketcap": {
        "api_key": "",
        "base_url": "https://pro-api.coinmarketcap.com/v1",
    },
    "openai": {
        "api_key": "",
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o",
        "temperature": 0.2,
    },
    "gemini": {
        "api_key": "",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "model": "gemini-2.0-flash",
    },
    "analysis": {"provider": "gemini"},
}


@dataclass
class ConfigValidationError:
    """Represents a configuration validation error."""
    path: str
    message: str


class ConfigValidationException(Exception):
    """Raised when config validation fails."""

    def __init__(self, errors: List[ConfigValidationError]):
        self.errors = errors
        messages = [f"{e.path}: {e.message}" for e in errors]
        super().__init__("Configuration validation failed:\n" + "\n".join(messages))


def _provider_section(with_model: bool = True) -> Dict[str, Any]:
    properties = {
        "api_key": {"type": "str", "required": False},
        "base_url": {"type": "str", "required": False},
    }
    if with_model:
        properties["model"] = {"type": "str", "required": False}
    return {"type": "dict", "required": False, "properties": properties}


CONFIG_SCHEMA = {
    "server": {
        "type": "dict",
        "required": False,
        "properties": {
            "host": {"type": "str", "required": False},
            "port": {"type": "int", "required": False, "min": 1, "max": 65535},
            "debug": {"type": "bool", "required": False},
        }
    },
    "logging": {
        "type": "dict",
        "required": False,
        "properties": {
            "level": {"type": "str", "required": False, "options": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
            "format": {"type": "str", "required": False},
        }
    },
    "cors": {
        "type": "dict",
        "required": False,
        "properties": {
            "allowed_origins": {"type": "list", "required": False},
        }
    },
    "http": {
        "type": "dict",
        "required": False,
        "properties": {
            "timeout_seconds": {"type": "float", "required": False, "min": 1, "max": 600},
        }
    },
    "coinmarketcap": _provider_section(with_model=False),
    "openai": {
        "type": "dict",
        "required": False,
        "properties": {
            **_provider_section()["properties"],
            "temperature": {"type": "float", "required": False, "min": 0, "max": 2},
        }
    },
    "gemini": _provider_section(),
    "analysis": {
        "type": "dict",
        "required": False,
        "properties": {
            "provider": {"type": "str", "required": False, "options": ["openai", "gemini"]},
        }
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigService:
    """Service for loading and validating configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config service.

        Args:
            config_path: Path to config file. If None, uses $CRYPTO_INSIGHT_CONFIG
                or ``config.yaml`` in the repository root.
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_PATH_ENV)
        if config_path is None:
            root_dir = Path(__file__).parent.parent.parent.parent
            config_path = str(root_dir / "config.yaml")

        self.config_path = config_path
        self._config: Dict[str, Any] = _merge(DEFAULTS, {})

    def load_and_validate(self) -> Dict[str, Any]:
        """Load and validate the configuration file.

        Returns:
            Effective configuration (defaults, file, then env overrides).

        Raises:
            ConfigValidationException: If validation fails.
        """
        errors: List[ConfigValidationError] = []
        file_config: Any = {}

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    file_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                errors.append(ConfigValidationError(
                    path="",
                    message=f"Invalid YAML syntax: {str(e)}"
                ))
                raise ConfigValidationException(errors)
        else:
            logger.warning(f"Config file not found at {self.config_path}, using defaults")

        if file_config is None:
            file_config = {}

        if not isinstance(file_config, dict):
            errors.append(ConfigValidationError(
                path="",
                message=f"Config must be a dictionary, got {type(file_config).__name__}"
            ))
            raise ConfigValidationException(errors)

        errors.extend(self._validate_dict(file_config, CONFIG_SCHEMA, ""))
        if errors:
            raise ConfigValidationException(errors)

        config = _merge(DEFAULTS, file_config)
        self._apply_env_overrides(config)

        for section in ("coinmarketcap", "openai", "gemini"):
            if not config[section].get("api_key"):
                logger.warning(f"No API key configured for {section}; requests to it will fail")

        self._config = config
        logger.info(f"Configuration loaded from {self.config_path}")
        return config

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        for env_name, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if not value:
                continue
            section, name = key.split(".")
            config[section][name] = value

    def _validate_dict(
        self,
        data: Dict[str, Any],
        schema: Dict[str, Any],
        path: str
    ) -> List[ConfigValidationError]:
        """Validate a dictionary against schema, including unknown keys."""
        errors = []

        for key in data:
            if key not in schema:
                errors.append(ConfigValidationError(
                    path=f"{path}.{key}" if path else key,
                    message=f"Unknown configuration key '{key}'"
                ))

        for key, prop_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key not in data:
                if prop_schema.get("required", False):
                    errors.append(ConfigValidationError(
                        path=current_path,
                        message="Required field missing"
                    ))
                continue

            errors.extend(self._validate_value(data[key], prop_schema, current_path))

        return errors

    def _validate_value(
        self,
        value: Any,
        schema: Dict[str, Any],
        path: str
    ) -> List[ConfigValidationError]:
        """Validate a single value: type, numeric range and allowed options."""
        errors = []
        expected_type = schema.get("type")

        type_map = {
            "str": str,
            "int": int,
            "float": (int, float),
            "bool": bool,
            "list": list,
            "dict": dict,
        }

        if expected_type not in type_map:
            return errors

        if not isinstance(value, type_map[expected_type]) or (
            expected_type in ("int", "float") and isinstance(value, bool)
        ):
            errors.append(ConfigValidationError(
                path=path,
                message=f"Expected {expected_type}, got {type(value).__name__}"
            ))
            return errors

        if expected_type == "dict" and "properties" in schema:
            errors.extend(self._validate_dict(value, schema["properties"], path))

        if expected_type in ("int", "float"):
            if "min" in schema and value < schema["min"]:
                errors.append(ConfigValidationError(
                    path=path,
                    message=f"Value {value} is below minimum {schema['min']}"
                ))
            if "max" in schema and value > schema["max"]:
                errors.append(ConfigValidationError(
                    path=path,
                    message=f"Value {value} is above maximum {schema['max']}"
                ))

        if "options" in schema and value not in schema["options"]:
            errors.append(ConfigValidationError(
                path=path,
                message=f"Value '{value}' not in allowed options: {schema['options']}"
            ))

        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: Dot-notation key (e.g., "openai.model")
            default: Default value if not found
        """
        value: Any = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value


# Global config service instance
config_service = ConfigService()
