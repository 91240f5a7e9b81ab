"""Data models for JSON syntax diagnostics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class JsonSyntaxDiagnostic:
    """Advisory hints explaining why a JSON document failed to parse."""

    hints: tuple[str, ...]
    line_number: int | None = None  # 1-based, when the parser reported one
