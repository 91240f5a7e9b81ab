"""Exception hierarchy for gitty.

The extraction layer itself never raises for malformed input; these
exceptions cover the places where a caller has to stop: a required file is
missing, a config fails its schema, or no API key can be found.
"""

from __future__ import annotations

from pathlib import Path


class GittyError(Exception):
    """Base exception for all gitty errors."""


class ConfigError(GittyError):
    """Configuration could not be used."""


class ConfigNotFoundError(ConfigError):
    """A required configuration file does not exist.

    Attributes:
        path: Location that was looked up.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class ConfigValidationError(ConfigError):
    """Configuration parsed as JSON but does not match the schema."""
