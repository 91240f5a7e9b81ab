"""Data models for commit message suggestions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommitCandidate:
    """A proposed commit message, ranked by the order it was returned in."""

    message: str
    confidence: float  # 0.0 to 1.0

    def to_dict(self) -> dict[str, str | float]:
        return {"message": self.message, "confidence": self.confidence}
