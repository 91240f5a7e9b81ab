"""Protocol definitions for pluggable adapters."""

from .display import Display

__all__ = ["Display"]
