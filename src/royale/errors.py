"""Exceptions raised by the royale package."""

from __future__ import annotations


class RoyaleError(Exception):
    """Base class for all royale errors."""


class StoreWriteError(RoyaleError):
    """Persisting the game state or the README failed.

    The only error allowed to abort an invocation: the triggering event
    would otherwise be lost without trace.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"could not write {path}: {reason}")
        self.path = path
        self.reason = reason
