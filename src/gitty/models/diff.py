"""Data models for unified diffs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DiffStatistics:
    """Line and file counts for a unified diff."""

    additions: int = 0
    deletions: int = 0
    files: int = 0

    @property
    def total_changes(self) -> int:
        """Number of added plus deleted lines."""
        return self.additions + self.deletions

    def to_dict(self) -> dict[str, int]:
        return {"additions": self.additions, "deletions": self.deletions, "files": self.files}
