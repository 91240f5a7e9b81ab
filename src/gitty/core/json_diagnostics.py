"""Human-readable hints for JSON documents that failed to parse.

The checks here are not a JSON grammar. Each one is a small predicate that
looks for a mistake people commonly make when hand-editing config files.
Predicates run in a fixed order and every one that matches contributes a
hint, so the first hint shown is the most likely culprit.
"""

from __future__ import annotations

import re
from collections.abc import Callable

import structlog

from gitty.models.diagnostic import JsonSyntaxDiagnostic

log = structlog.get_logger()

GENERIC_HINT = "Common issues: missing quotes, trailing commas, unclosed braces {}"

TRAILING_COMMA_PATTERN = re.compile(r",\s*[}\]]")
STRING_LITERAL_PATTERN = re.compile(r'"(?:[^"\\\n]|\\.)*"')
UNQUOTED_VALUE_PATTERN = re.compile(r":\s*([A-Za-z_][A-Za-z0-9_]*)")
UNQUOTED_KEY_PATTERN = re.compile(r"[{,]\s*[A-Za-z_][A-Za-z0-9_]*\s*:")

# Python's json module reports "line 3 column 5 (char 20)"
LINE_PATTERN = re.compile(r"\bline (\d+)")
# Other parsers report a character offset instead
POSITION_PATTERN = re.compile(r"\b(?:position|char) (\d+)")

JSON_LITERALS = frozenset({"true", "false", "null"})


def _mask_strings(text: str) -> str:
    """Replace the contents of every string literal with nothing.

    Keeps structure (quotes, colons, commas) intact while making sure text
    inside values like ``"note: fix it"`` cannot trigger a check.
    """
    return STRING_LITERAL_PATTERN.sub('""', text)


def has_trailing_comma(text: str) -> bool:
    """A comma directly before a closing ``}`` or ``]``."""
    return bool(TRAILING_COMMA_PATTERN.search(_mask_strings(text)))


def has_unquoted_value(text: str) -> bool:
    """A bare identifier used as a value, other than true/false/null."""
    masked = _mask_strings(text)
    return any(
        match.group(1) not in JSON_LITERALS for match in UNQUOTED_VALUE_PATTERN.finditer(masked)
    )


def has_unquoted_key(text: str) -> bool:
    """A bare identifier used as a property name."""
    return bool(UNQUOTED_KEY_PATTERN.search(_mask_strings(text)))


def has_unbalanced_braces(text: str) -> bool:
    """Different numbers of ``{`` and ``}`` outside strings."""
    masked = _mask_strings(text)
    return masked.count("{") != masked.count("}")


def _brace_hint(text: str) -> str:
    masked = _mask_strings(text)
    if masked.count("{") > masked.count("}"):
        return "Detected unclosed braces - missing closing }"
    return "Detected unbalanced braces - extra closing }"


SyntaxCheck = tuple[Callable[[str], bool], Callable[[str], str]]

SYNTAX_CHECKS: tuple[SyntaxCheck, ...] = (
    (has_trailing_comma, lambda _: "Detected trailing comma - remove the comma before } or ]"),
    (has_unquoted_value, lambda _: "Detected unquoted values - wrap string values in quotes"),
    (
        has_unquoted_key,
        lambda _: "Detected unquoted property names - wrap property names in quotes",
    ),
    (has_unbalanced_braces, _brace_hint),
)


def offset_to_line(text: str, offset: int) -> int:
    """Convert a 0-based character offset into a 1-based line number."""
    offset = max(0, min(offset, len(text)))
    return text.count("\n", 0, offset) + 1


def extract_line_number(text: str, parse_error: str) -> int | None:
    """Find the line a parser error message points at.

    Args:
        text: The document that failed to parse.
        parse_error: The parser's error message.

    Returns:
        1-based line number, or None if the message carries no location.
    """
    match = LINE_PATTERN.search(parse_error)
    if match:
        line = int(match.group(1))
        return line if line >= 1 else None

    match = POSITION_PATTERN.search(parse_error)
    if match:
        return offset_to_line(text, int(match.group(1)))

    return None


def diagnose(text: str, parse_error: str) -> JsonSyntaxDiagnostic:
    """Explain why ``text`` is not valid JSON.

    Never raises and always returns at least one hint.

    Args:
        text: Raw document text.
        parse_error: Error message from the JSON parser.

    Returns:
        Diagnostic with ordered hints and an optional line number.
    """
    hints: list[str] = []

    for check, hint in SYNTAX_CHECKS:
        if check(text):
            hints.append(hint(text))

    if not hints:
        hints.append(GENERIC_HINT)

    line_number = extract_line_number(text, parse_error or "")
    if line_number is not None:
        hints.append(f"Error appears to be around line {line_number}")

    log.debug("json_diagnosed", hint_count=len(hints), line_number=line_number)
    return JsonSyntaxDiagnostic(hints=tuple(hints), line_number=line_number)
