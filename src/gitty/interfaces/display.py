"""Abstract interface for user-facing diagnostics."""

from typing import Protocol


class Display(Protocol):
    """Where user-facing errors, warnings and hints are shown.

    Log events go to structlog; this surface is for the human at the
    terminal and must always carry remediation text alongside a failure.
    """

    def error(self, message: str) -> None:
        """Show a failure headline."""
        ...

    def warning(self, message: str) -> None:
        """Show a recoverable problem."""
        ...

    def hint(self, message: str) -> None:
        """Show supporting detail or a remediation step."""
        ...
