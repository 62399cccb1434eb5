"""Exception hierarchy for AssessPO optimization runs."""

from __future__ import annotations

from enum import Enum


class RunState(str, Enum):
    SCORING = "scoring"
    DECIDING = "deciding"
    IMPROVING = "improving"
    DONE = "done"
    FAILED = "failed"


class AssessPOError(Exception):
    """Base class for every error raised by the optimization loop."""


class GenerationError(AssessPOError):
    """The text-generation service failed to produce a response.

    ``transient`` marks failures worth retrying (rate limits, server errors,
    dropped connections). Authentication or bad-request failures are not.
    """

    def __init__(self, message: str, *, transient: bool = True) -> None:
        super().__init__(message)
        self.transient = transient


class MalformedResponseError(AssessPOError):
    """The model's response could not be decoded into the expected shape."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class ResponseValidationError(AssessPOError):
    """The response decoded but breaks a semantic rule (range, empty list)."""


class GradeNormalizationError(ResponseValidationError):
    """The overall grade is neither a known letter nor a 0-20 number."""


class MissingVariantError(ResponseValidationError):
    """An improvement response lacks one of its two candidate rewrites."""


class OptimizationCancelled(AssessPOError):
    """The caller's cancellation signal fired during the run."""


class DeadlineExceededError(AssessPOError):
    """A per-call or per-run deadline expired."""


class OptimizationFailed(AssessPOError):
    """A run aborted in ``state`` after ``attempts`` tries of the failing step."""

    def __init__(self, state: RunState, attempts: int, cause: Exception) -> None:
        super().__init__(
            f"optimization failed while {state.value} after {attempts} "
            f"attempt{'s' if attempts != 1 else ''}: {cause}"
        )
        self.state = state
        self.attempts = attempts
        self.cause = cause
