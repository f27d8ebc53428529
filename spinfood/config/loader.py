"""
ConfigLoader - Unified fast-fail configuration management.

Loads configuration from environment variables, explicit values (a dict or a JSON file)
and schema defaults, in that order of precedence. Unknown keys and invalid values fail
immediately; there are no silent fallbacks beyond the schema defaults.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

from .errors import (
    ConfigError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .schema import CONFIG_SCHEMA, get_all_required_keys
from .types import ConfigType

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Unified configuration loader with fast-fail behavior.

    Usage:
        # Initialize at startup (validates every provided value)
        ConfigLoader.initialize(config_path="spinfood.json")

        # Get singleton instance
        loader = ConfigLoader.get_instance()

        # Typed accessors
        seconds = loader.get_float("solver.time_limit.seconds")

        # Test substitution
        with ConfigLoader.use(ConfigLoader(values={"solver.num_workers": 1})):
            pass
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        config_path: str | Path | None = None,
    ):
        """
        Initialize the config loader.

        Args:
            values: Explicit values keyed by dot-notation key.
            config_path: JSON file with a flat object of dot-notation keys. Explicit
                values win over file values.
        """
        self._values: dict[str, Any] = {}
        if config_path is not None:
            self._values.update(self._read_config_file(Path(config_path)))
        if values:
            self._values.update(values)

        self._cache: dict[str, Any] = {}
        self._validated = False

    @staticmethod
    def _read_config_file(path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        logger.debug(f"Loaded {len(data)} config values from {path}")
        return data

    @classmethod
    def initialize(
        cls,
        values: dict[str, Any] | None = None,
        config_path: str | Path | None = None,
        validate_on_init: bool = True,
    ) -> ConfigLoader:
        """
        Initialize the singleton ConfigLoader.

        Args:
            values: Explicit values keyed by dot-notation key
            config_path: Optional JSON config file
            validate_on_init: If True, validates all provided values and required keys

        Returns:
            The initialized ConfigLoader instance

        Raises:
            ConfigError: If any provided value is unknown or invalid
        """
        if cls._initialized:
            logger.debug("ConfigLoader already initialized, returning existing instance")
            return cls._instance  # type: ignore

        instance = cls(values=values, config_path=config_path)

        if validate_on_init:
            instance.validate_all()

        cls._instance = instance
        cls._initialized = True
        logger.debug("ConfigLoader initialized")
        return instance

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """Get the singleton instance, initializing with defaults if needed."""
        if not cls._initialized or cls._instance is None:
            logger.debug("ConfigLoader auto-initializing (no explicit initialize() call)")
            return cls.initialize(validate_on_init=False)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton state. For testing only."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """Temporarily replace the singleton with a custom loader."""
        original = cls._instance
        original_initialized = cls._initialized
        cls._instance = loader
        cls._initialized = True
        try:
            yield
        finally:
            cls._instance = original
            cls._initialized = original_initialized

    def validate_all(self) -> None:
        """
        Validate every explicitly provided value and every required key.

        Raises:
            ConfigError: If any key is unknown, missing or invalid
        """
        unknown_keys = sorted(key for key in self._values if key not in CONFIG_SCHEMA)
        missing_keys = [key for key in get_all_required_keys() if self._raw_value(key) is None]
        invalid_values: list[str] = []

        for key in CONFIG_SCHEMA:
            raw_value = self._raw_value(key)
            if raw_value is None:
                continue
            schema = CONFIG_SCHEMA[key]
            try:
                typed_value = self._convert_type(raw_value, schema.config_type)
            except (ValueError, TypeError) as e:
                invalid_values.append(f"{key}: type conversion failed - {e}")
                continue
            error = schema.validate(typed_value)
            if error:
                invalid_values.append(f"{key}: {error}")

        if unknown_keys or missing_keys or invalid_values:
            error_parts = []
            if unknown_keys:
                error_parts.append(f"Unknown keys ({len(unknown_keys)}): {unknown_keys}")
            if missing_keys:
                error_parts.append(f"Missing required keys ({len(missing_keys)}): {missing_keys}")
            if invalid_values:
                error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")
            raise ConfigError("Configuration validation failed.\n" + "\n".join(error_parts))

        self._validated = True
        logger.debug(f"Validated {len(self._values)} provided config values")

    def _get_env_key(self, key: str) -> str:
        """Convert dot notation to environment variable name."""
        # solver.time_limit.seconds -> CONFIG_SOLVER_TIME_LIMIT_SECONDS
        return "CONFIG_" + key.upper().replace(".", "_")

    def _raw_value(self, key: str) -> Any | None:
        env_value = os.environ.get(self._get_env_key(key))
        if env_value is not None:
            return env_value
        return self._values.get(key)

    def get(self, key: str) -> Any:
        """
        Get a configuration value.

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If no source and no default provides a value
            ValidationError: If value fails validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'")

        schema = CONFIG_SCHEMA[key]

        # Environment is the highest priority override and is never cached
        env_key = self._get_env_key(key)
        env_value = os.environ.get(env_key)
        if env_value is not None:
            try:
                typed_value = self._convert_type(env_value, schema.config_type)
            except (ValueError, TypeError) as e:
                raise ValidationError(f"Environment variable {env_key} has invalid type: {e}") from e
            error = schema.validate(typed_value)
            if error:
                raise ValidationError(f"Environment variable {env_key}: {error}")
            return typed_value

        if key in self._cache:
            return self._cache[key]

        raw_value = self._values.get(key)
        if raw_value is None:
            if schema.required or schema.default is None:
                raise MissingKeyError(f"Config key '{key}' has no value and no default")
            raw_value = schema.default

        try:
            typed_value = self._convert_type(raw_value, schema.config_type)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Config key '{key}' has invalid type: {e}") from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Config key '{key}': {error}")

        self._cache[key] = typed_value
        return typed_value

    def get_optional(self, key: str) -> Any | None:
        """Get a value, or None when the key is known but unset."""
        try:
            return self.get(key)
        except MissingKeyError:
            return None

    def get_int(self, key: str, default: int | None = None) -> int:
        """Get an integer config value."""
        try:
            return cast(int, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def get_float(self, key: str, default: float | None = None) -> float:
        """Get a float config value."""
        try:
            return cast(float, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def get_bool(self, key: str, default: bool | None = None) -> bool:
        """Get a boolean config value."""
        try:
            return cast(bool, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def get_str(self, key: str, default: str | None = None) -> str:
        """Get a string config value."""
        try:
            return cast(str, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def get_solver_param(self, param_type: str, subtype: str | None = None) -> Any:
        """
        Get a CP-SAT solver parameter.

        Args:
            param_type: Parameter type (e.g., "time_limit", "num_workers").
            subtype: Subtype (e.g., "seconds").
        """
        key = f"solver.{param_type}.{subtype}" if subtype else f"solver.{param_type}"
        return self.get(key)

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """Convert a raw value to the specified type."""
        if config_type == ConfigType.INT:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{value} is not an integer")
            return int(value)
        elif config_type == ConfigType.FLOAT:
            return float(value)
        elif config_type == ConfigType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        elif config_type == ConfigType.STRING:
            return str(value)
        else:
            return value

    def as_dict(self) -> dict[str, Any]:
        """Effective values for every key that resolves, for logging a run's settings."""
        return {key: value for key in CONFIG_SCHEMA if (value := self.get_optional(key)) is not None}
