"""Exception hierarchy for server configuration.

File system failures are not wrapped: they surface as the builtin OSError
family exactly as raised by the underlying call.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for all configuration errors."""
    pass


class NoConfigFileError(ConfigError):
    """Raised when rewriting a config that was not loaded from a file."""

    def __init__(self, message: str = "Running without a config file"):
        super().__init__(message)


class ConfigDecodeError(ConfigError):
    """Raised when a config document is malformed or has mistyped values."""
    pass


class ConfigEncodeError(ConfigError):
    """Raised when a config cannot be serialized."""
    pass
