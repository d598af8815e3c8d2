"""Custom exception hierarchy for the nonogram engine."""


class NonogramError(Exception):
    """Base exception for engine failures."""


class InvalidClueError(NonogramError):
    """Raised when a clue sequence contains invalid run lengths."""


class IncompleteLineError(NonogramError):
    """Raised when clues are requested for a line that still has unknown cells."""


class ValidationError(NonogramError):
    """Raised when a puzzle fails its integrity checks."""


class GenerationCancelled(NonogramError):
    """Raised when a caller cancels a long-running generation or search."""


class CandidateRejected(NonogramError):
    """Raised inside a generation attempt when a candidate fails an acceptance rule."""
