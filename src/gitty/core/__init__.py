"""Core extraction logic."""

from .config_extractor import MalformedPolicy, extract, read_json_file
from .diff_summarizer import diff_stats, truncate_diff
from .json_diagnostics import diagnose
from .message_formatter import format_message
from .prompt_builder import build_system_prompt, build_user_prompt
from .response_interpreter import interpret

__all__ = [
    # Diff summarizer
    "diff_stats",
    "truncate_diff",
    # JSON diagnostics
    "diagnose",
    # Config extraction
    "MalformedPolicy",
    "extract",
    "read_json_file",
    # Commit messages
    "format_message",
    "interpret",
    # Prompts
    "build_system_prompt",
    "build_user_prompt",
]
