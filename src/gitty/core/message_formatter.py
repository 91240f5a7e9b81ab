"""Commit message normalization."""

from __future__ import annotations

import re

# "feat: add x" -> "feat: Add x"
AFTER_COLON_PATTERN = re.compile(r": ([a-z])")


def capitalize_message(message: str) -> str:
    """Upper-case the first character and the first letter after each ``": "``."""
    if not message:
        return message
    result = message[0].upper() + message[1:]
    return AFTER_COLON_PATTERN.sub(lambda m: f": {m.group(1).upper()}", result)


def format_message(message: str, prepend: str | None = None) -> str:
    """Normalize a commit message and optionally add a prefix.

    Args:
        message: Raw message text.
        prepend: Prefix such as a ticket id; joined with ``": "``.

    Returns:
        The capitalized message, prefixed when ``prepend`` is non-empty.
    """
    capitalized = capitalize_message(message)
    return f"{prepend}: {capitalized}" if prepend else capitalized
