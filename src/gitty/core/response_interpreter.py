"""Turn raw model output into ranked commit message candidates.

Models are asked for a JSON array but do not reliably return one. The
interpreter tries strategies from most to least structured and stops at the
first that yields something usable:

1. Strip a surrounding markdown code fence.
2. Parse as JSON and decode one of the accepted shapes.
3. Mine numbered, then bulleted, lines from the text.
4. Fall back to a generic message.

The result always holds between one and three candidates, best first.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from gitty.core.message_formatter import format_message
from gitty.models.commit import CommitCandidate

log = structlog.get_logger()

MAX_CANDIDATES = 3
DEFAULT_CONFIDENCE = 0.5
FALLBACK_MESSAGE = "Update code and documentation"

# Keys a model may wrap its candidate list in, highest priority first. The
# first non-empty list wins, so an empty "messages": [] does not hide a
# populated "commits" list.
CANDIDATE_LIST_KEYS = ("messages", "commits", "suggestions")

# Confidence of the first plain-text candidate, lowered by a step per item
PLAIN_TEXT_CONFIDENCE = 0.9
PLAIN_TEXT_CONFIDENCE_STEP = 0.1

OPENING_FENCE_PATTERN = re.compile(r"\A```[\w+-]*[ \t]*\r?\n")
CLOSING_FENCE_PATTERN = re.compile(r"\r?\n```\s*\Z")
NUMBERED_LINE_PATTERN = re.compile(r"^[ \t]*\d+[.)][ \t]+(.+)$", re.MULTILINE)
BULLET_LINE_PATTERN = re.compile(r"^[ \t]*[-•*][ \t]+(.+)$", re.MULTILINE)
BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
ITALIC_PATTERN = re.compile(r"\*(.*?)\*")


class CandidateResponse(BaseModel):
    """One candidate as the model returned it."""

    model_config = ConfigDict(extra="ignore", strict=True)

    message: str
    confidence: Any = DEFAULT_CONFIDENCE

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Require visible text."""
        if not v.strip():
            raise ValueError("message must not be blank")
        return v.strip()

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: Any) -> float:
        """Keep numeric confidences within [0, 1], default anything else."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return DEFAULT_CONFIDENCE
        if isinstance(v, float) and math.isnan(v):
            return DEFAULT_CONFIDENCE
        return float(min(1.0, max(0.0, v)))


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole response.

    Args:
        text: Raw response text.

    Returns:
        Trimmed text with the opening fence line (optionally language
        tagged, e.g. ```json) and the closing fence removed.
    """
    clean = text.strip()
    if clean.startswith("```"):
        clean = OPENING_FENCE_PATTERN.sub("", clean, count=1)
        clean = CLOSING_FENCE_PATTERN.sub("", clean, count=1)
    return clean


def _decode_sequence(parsed: Any) -> list[Any] | None:
    return parsed if isinstance(parsed, list) else None


def _decode_keyed_list(parsed: Any) -> list[Any] | None:
    if not isinstance(parsed, dict):
        return None
    for key in CANDIDATE_LIST_KEYS:
        value = parsed.get(key)
        if isinstance(value, list) and value:
            return value
    return None


def _decode_single(parsed: Any) -> list[Any] | None:
    if isinstance(parsed, dict) and parsed.get("message"):
        return [parsed]
    return None


# Shapes tried in order; the first decoder that recognizes the value wins
RESPONSE_SHAPES: tuple[tuple[str, Callable[[Any], list[Any] | None]], ...] = (
    ("sequence", _decode_sequence),
    ("keyed_list", _decode_keyed_list),
    ("single", _decode_single),
)


def decode_shape(parsed: Any) -> list[Any]:
    """Find the list of raw candidates inside a parsed JSON value.

    Args:
        parsed: Any value produced by ``json.loads``.

    Returns:
        The raw candidate entries, or an empty list when no shape matches.
    """
    for name, decoder in RESPONSE_SHAPES:
        items = decoder(parsed)
        if items is not None:
            log.debug("response_shape_decoded", shape=name, item_count=len(items))
            return items
    return []


def validate_candidates(items: list[Any], prepend: str | None = None) -> list[CommitCandidate]:
    """Validate raw entries, dropping any without a usable message.

    Order is preserved and at most MAX_CANDIDATES are returned.
    """
    candidates: list[CommitCandidate] = []
    for item in items:
        if len(candidates) >= MAX_CANDIDATES:
            break
        try:
            validated = CandidateResponse.model_validate(item)
        except ValidationError:
            continue
        candidates.append(
            CommitCandidate(
                message=format_message(validated.message, prepend),
                confidence=validated.confidence,
            )
        )
    return candidates


def parse_structured(text: str, prepend: str | None = None) -> list[CommitCandidate]:
    """Interpret ``text`` as JSON.

    Returns:
        Valid candidates, or an empty list when the text is not JSON or
        holds nothing usable.
    """
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as e:
        log.debug("response_not_json", error=str(e)[:200])
        return []
    return validate_candidates(decode_shape(parsed), prepend)


def _strip_emphasis(text: str) -> str:
    text = BOLD_PATTERN.sub(r"\1", text.strip())
    return ITALIC_PATTERN.sub(r"\1", text).strip()


def _collect_lines(pattern: re.Pattern[str], text: str) -> list[str]:
    found: list[str] = []
    for match in pattern.finditer(text):
        content = _strip_emphasis(match.group(1))
        if content:
            found.append(content)
        if len(found) >= MAX_CANDIDATES:
            break
    return found


def extract_from_plain_text(text: str) -> list[str]:
    """Pull list items out of prose.

    Numbered items win over bulleted ones; bullets are only looked at when
    no numbered item exists.

    Returns:
        Up to MAX_CANDIDATES item texts in document order.
    """
    return _collect_lines(NUMBERED_LINE_PATTERN, text) or _collect_lines(
        BULLET_LINE_PATTERN, text
    )


def parse_plain_text(text: str, prepend: str | None = None) -> list[CommitCandidate]:
    return [
        CommitCandidate(
            message=format_message(message, prepend),
            confidence=round(PLAIN_TEXT_CONFIDENCE - i * PLAIN_TEXT_CONFIDENCE_STEP, 2),
        )
        for i, message in enumerate(extract_from_plain_text(text))
    ]


def fallback_candidate(prepend: str | None = None) -> CommitCandidate:
    return CommitCandidate(
        message=format_message(FALLBACK_MESSAGE, prepend),
        confidence=DEFAULT_CONFIDENCE,
    )


def interpret(response: str, prepend: str | None = None) -> list[CommitCandidate]:
    """Interpret a model response as commit message candidates.

    Never raises: output that cannot be understood at all becomes a single
    low-confidence generic message.

    Args:
        response: Raw text returned by the model.
        prepend: Optional prefix added to every message.

    Returns:
        One to three candidates, best first.
    """
    text = strip_code_fence(response or "")

    candidates = parse_structured(text, prepend)
    if candidates:
        log.debug("response_parsed_structured", count=len(candidates))
        return candidates

    candidates = parse_plain_text(text, prepend)
    if candidates:
        log.info("response_parsed_plain_text", count=len(candidates))
        return candidates

    log.warning("response_unusable_using_fallback", response_preview=text[:200])
    return [fallback_candidate(prepend)]
