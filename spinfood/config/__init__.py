"""
Unified configuration management for spinfood.

Values are resolved from CONFIG_* environment variables, then explicit values
(a dict or a JSON file), then schema defaults. Unknown keys and invalid values fail fast.

Usage:
    from spinfood.config import ConfigLoader, ConfigError

    # Initialize at startup
    ConfigLoader.initialize(config_path="spinfood.json")

    # Get singleton instance
    config = ConfigLoader.get_instance()

    # Typed accessors
    limit = config.get_int("pairing.max_pairs_per_kitchen")
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .loader import ConfigLoader
from .schema import CONFIG_SCHEMA, get_all_required_keys, validate_key
from .types import ConfigKey, ConfigType

__all__ = [
    # Main loader
    "ConfigLoader",
    # Error classes
    "ConfigError",
    "MissingKeyError",
    "ValidationError",
    "UnknownKeyError",
    # Schema
    "CONFIG_SCHEMA",
    "ConfigKey",
    "ConfigType",
    "get_all_required_keys",
    "validate_key",
]
