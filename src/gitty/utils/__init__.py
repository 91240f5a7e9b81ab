"""Utility functions and helpers.

- errors: Exception hierarchy
- security: Secret redaction for logs and display
- logging: Structured logging with secret sanitization
"""

from gitty.utils.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    GittyError,
)
from gitty.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
)
from gitty.utils.security import (
    RedactionError,
    SecretRedactor,
    SecurityError,
    mask_api_key,
)

__all__ = [
    # Errors
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "GittyError",
    # Logging
    "LogFormat",
    "LogLevel",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
    "bind_context",
    "clear_context",
    "configure_logging",
    "mask_api_key",
]
