"""Keeping provider API keys out of logs and terminal output.

Config files and the environment hold OpenAI and Gemini keys. Anything
that may echo config content (log events, ``show-config``) goes through
this module first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

log = structlog.get_logger()

# (pattern, description); generic assignments first so "apiKey": "..." is
# replaced as a whole before the provider-specific patterns run
KEY_PATTERNS: tuple[tuple[str, str], ...] = (
    (
        r"(?i)(api[_-]?key|secret|token|password)\"?\s*[=:]\s*[\"']?[\w-]{16,}",
        "Key assignment",
    ),
    (r"sk-proj-[a-zA-Z0-9_-]{20,}", "OpenAI project key"),
    (r"sk-[a-zA-Z0-9]{32,}", "OpenAI key"),
    (r"AIza[0-9A-Za-z\-_]{35}", "Google / Gemini key"),
    (r"ya29\.[0-9A-Za-z\-_]+", "Google OAuth token"),
)

MASK = "****"
VISIBLE_SUFFIX = 4


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """A secret pattern could not be compiled or applied."""


class SecretRedactor:
    """Replaces API keys in text with a placeholder.

    Fails closed: a pattern that does not compile stops construction, and a
    failure while substituting raises instead of returning the input.

    Usage:
        redactor = SecretRedactor()
        log.debug("config_dumped", text=redactor.redact(raw_config))
    """

    DEFAULT_PATTERNS = KEY_PATTERNS

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Iterable[tuple[str, str]] = (),
    ) -> None:
        self.placeholder = placeholder
        self._compiled: list[tuple[re.Pattern[str], str]] = []

        for source, description in (*self.DEFAULT_PATTERNS, *custom_patterns):
            try:
                self._compiled.append((re.compile(source), description))
            except re.error as e:
                log.error("secret_pattern_invalid", pattern=description, error=str(e))
                raise RedactionError(f"Failed to compile secret pattern {source!r}: {e}") from e

    def redact(self, text: str) -> str:
        """Return ``text`` with every detected key replaced.

        Raises:
            RedactionError: If a substitution fails.
        """
        if not text:
            return text
        for pattern, description in self._compiled:
            try:
                text = pattern.sub(self.placeholder, text)
            except (re.error, RecursionError) as e:
                raise RedactionError(f"Redaction with {description!r} failed: {e}") from e
        return text


def mask_api_key(value: str) -> str:
    """Mask an API key for display, keeping only the last four characters.

    Short keys are masked completely; an empty value reads ``(not set)``.
    """
    if not value:
        return "(not set)"
    if len(value) <= 2 * VISIBLE_SUFFIX:
        return MASK
    return f"{MASK}{value[-VISIBLE_SUFFIX:]}"
