"""Adapters implementing the protocols in gitty.interfaces."""

from .console import ConsoleDisplay

__all__ = ["ConsoleDisplay"]
