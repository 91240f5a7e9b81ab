"""Read JSON config text into data, with diagnostics when it is broken.

The same extraction serves config layers that must be well-formed (the
global config: a syntax error stops the program with an explanation) and
layers that may degrade (a repository's local config: a syntax error is
reported and the caller falls back to the next layer). Which behaviour
applies is chosen per call with MalformedPolicy.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

from gitty.adapters.console import ConsoleDisplay
from gitty.core.json_diagnostics import diagnose
from gitty.interfaces.display import Display
from gitty.models.diagnostic import JsonSyntaxDiagnostic
from gitty.models.outcome import ABSENT, ExtractionOutcome, Malformed, Success
from gitty.utils.errors import ConfigError, ConfigNotFoundError

log = structlog.get_logger()

MALFORMED_EXIT_STATUS = 1


class MalformedPolicy(StrEnum):
    """What to do when config text exists but is not valid JSON."""

    ABORT = "abort"
    FALLBACK = "fallback"


def _report_abort(
    diagnostic: JsonSyntaxDiagnostic, description: str, location: str, display: Display
) -> None:
    display.error(f"Your {description} has invalid JSON syntax")
    display.hint(f"File location: {location}")
    display.hint("Please fix the JSON syntax or delete the file to reset to defaults")
    for hint in diagnostic.hints:
        display.hint(hint)


def _report_fallback(
    diagnostic: JsonSyntaxDiagnostic, description: str, location: str, display: Display
) -> None:
    display.warning(f"Your {description} has malformed JSON syntax")
    display.warning("Falling back to the next configuration layer")
    display.hint(f"Please fix or delete {location} to reset")
    for hint in diagnostic.hints:
        display.hint(hint)


def extract(
    read: Callable[[], str],
    *,
    allow_missing: bool = False,
    on_malformed: MalformedPolicy | str = MalformedPolicy.ABORT,
    location: str = "<input>",
    description: str = "JSON file",
    display: Display | None = None,
) -> ExtractionOutcome[Any]:
    """Read and parse JSON text.

    Args:
        read: Returns the raw text; raises FileNotFoundError if the
            resource does not exist.
        allow_missing: Return Absent instead of raising when missing.
        on_malformed: ABORT exits with status 1 after explaining the
            problem; FALLBACK warns and returns Malformed.
        location: Where the text came from, shown to the user.
        description: What the text is, e.g. "gitty configuration".
        display: Surface for user-facing messages.

    Returns:
        Success with the parsed value, Absent, or (FALLBACK only) Malformed.

    Raises:
        ConfigNotFoundError: Missing and ``allow_missing`` is False.
        ConfigError: The text could not be read for another reason.
        SystemExit: Malformed under the ABORT policy.
    """
    policy = MalformedPolicy(on_malformed)
    display = display if display is not None else ConsoleDisplay()

    try:
        text = read()
    except FileNotFoundError as e:
        if allow_missing:
            log.debug("config_absent", location=location)
            return ABSENT
        display.error(f"{description[:1].upper()}{description[1:]} not found")
        display.hint(f"File location: {location}")
        raise ConfigNotFoundError(f"File not found: {location}", path=location) from e
    except (OSError, UnicodeDecodeError) as e:
        display.error(f"Failed to read {description}: {location}")
        display.hint("Check file permissions and content")
        raise ConfigError(f"Failed to read JSON from {location}: {e}") from e

    try:
        return Success(json.loads(text))
    except (ValueError, RecursionError) as e:
        diagnostic = diagnose(text, str(e))

    log.warning(
        "config_malformed",
        location=location,
        policy=policy.value,
        line_number=diagnostic.line_number,
        hints=list(diagnostic.hints),
    )

    if policy is MalformedPolicy.ABORT:
        _report_abort(diagnostic, description, location, display)
        raise SystemExit(MALFORMED_EXIT_STATUS)

    _report_fallback(diagnostic, description, location, display)
    return Malformed(diagnostic)


def read_json_file(
    path: Path | str,
    *,
    allow_missing: bool = False,
    on_malformed: MalformedPolicy | str = MalformedPolicy.ABORT,
    description: str = "JSON file",
    display: Display | None = None,
) -> ExtractionOutcome[Any]:
    """Extract JSON from a file on disk. See ``extract`` for semantics."""
    file_path = Path(path).expanduser()
    return extract(
        lambda: file_path.read_text(encoding="utf-8"),
        allow_missing=allow_missing,
        on_malformed=on_malformed,
        location=str(file_path),
        description=description,
        display=display,
    )
