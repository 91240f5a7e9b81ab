"""Data models and transfer objects."""

from .commit import CommitCandidate
from .diagnostic import JsonSyntaxDiagnostic
from .diff import DiffStatistics
from .outcome import ABSENT, Absent, ExtractionOutcome, Malformed, Success, value_or_none

__all__ = [
    # Diff models
    "DiffStatistics",
    # Diagnostic models
    "JsonSyntaxDiagnostic",
    # Extraction outcomes
    "ABSENT",
    "Absent",
    "ExtractionOutcome",
    "Malformed",
    "Success",
    "value_or_none",
    # Commit models
    "CommitCandidate",
]
