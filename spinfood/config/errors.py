"""Configuration error classes.

All config-related exceptions for fast-fail behavior.
"""

from __future__ import annotations

from spinfood.errors import SpinfoodError


class ConfigError(SpinfoodError):
    """Base exception for configuration errors."""

    pass


class MissingKeyError(ConfigError):
    """Raised when a required config key has neither a value nor a default."""

    pass


class ValidationError(ConfigError):
    """Raised when a config value fails validation."""

    pass


class UnknownKeyError(ConfigError):
    """Raised when an unknown config key is requested."""

    pass
