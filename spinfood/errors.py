"""Error classes for the pairing and grouping engines.

Routing outcomes (participants that cannot be paired, pairs that become successors) are
never raised. Only invariant violations and structural defects surface as exceptions.
"""

from __future__ import annotations


class SpinfoodError(Exception):
    """Base exception for spinfood errors."""

    pass


class InvariantViolationError(SpinfoodError):
    """Raised by validators when a generated pair breaks a hard invariant."""

    def __init__(self, pair_number: int, reason: str):
        self.pair_number = pair_number
        self.reason = reason
        super().__init__(f"{reason} in pair {pair_number}")


class CohortSizeError(SpinfoodError):
    """Raised when a cohort does not hold exactly the configured number of pairs."""

    pass


class CourseAssignmentError(SpinfoodError):
    """Raised when the host assignment model returns no solution."""

    pass


class InputFormatError(SpinfoodError):
    """Raised when an input file cannot be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
