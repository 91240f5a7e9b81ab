"""Result variants for reading structured config data.

A read either produced a value, found nothing (and that was allowed), or
found content that could not be parsed. Callers match on the variant to
decide whether to proceed, fall back to another config layer, or abort.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .diagnostic import JsonSyntaxDiagnostic

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The resource existed and parsed."""

    value: T


@dataclass(frozen=True)
class Absent:
    """The resource does not exist and absence was permitted."""


@dataclass(frozen=True)
class Malformed:
    """The resource exists but is not valid JSON."""

    diagnostic: JsonSyntaxDiagnostic


ABSENT = Absent()

ExtractionOutcome = Union[Success[T], Absent, Malformed]


def value_or_none(outcome: ExtractionOutcome[Any]) -> Any:
    """Return the parsed value, treating Absent and Malformed alike."""
    if isinstance(outcome, Success):
        return outcome.value
    return None
