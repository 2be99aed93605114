from __future__ import annotations


class InvalidInputError(ValueError):
    """Caller supplied something that can never be encoded (bad tempo, pitch, ...)."""


class TrackInvariantError(RuntimeError):
    """A built track is internally inconsistent. This is a bug, not bad input."""
