"""gitty - AI-drafted git commit messages.

The public surface is the extraction layer: diff summarizing, JSON config
diagnostics and extraction, and interpretation of model responses into
ranked commit message candidates.
"""

from gitty.core.config_extractor import MalformedPolicy, extract, read_json_file
from gitty.core.diff_summarizer import diff_stats, truncate_diff
from gitty.core.json_diagnostics import diagnose
from gitty.core.message_formatter import format_message
from gitty.core.response_interpreter import interpret
from gitty.models import CommitCandidate, DiffStatistics, JsonSyntaxDiagnostic

__all__ = [
    "CommitCandidate",
    "DiffStatistics",
    "JsonSyntaxDiagnostic",
    "MalformedPolicy",
    "diagnose",
    "diff_stats",
    "extract",
    "format_message",
    "interpret",
    "read_json_file",
    "truncate_diff",
]
