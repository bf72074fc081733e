"""
Exceptions raised while building and running factorial experiments.
"""

from typing import Any, Sequence


class ExperimentError(Exception):
    """Base exception for experiment errors."""
    pass


class KeyTooLong(ExperimentError):
    """Raised when a short key does not fit the configured length limit."""

    def __init__(self, key: str, limit: int):
        self.key = key
        self.length = len(key)
        self.limit = limit
        super().__init__(
            f"Short key '{key}' has {self.length} characters, limit is {limit}. "
            f"Provide shorter factor names or levels."
        )


class FactorMismatch(ExperimentError):
    """Raised when factor names and levels do not line up."""

    def __init__(self, names: Sequence[str], levels: Sequence[str]):
        self.names = list(names)
        self.levels = list(levels)
        super().__init__(
            f"Got {len(self.names)} factor names {self.names} "
            f"but {len(self.levels)} levels {self.levels}"
        )


class ValidationMismatch(ExperimentError):
    """Raised when a treatment's output fails validation."""

    def __init__(self, treatment_key: str, outcome: Any):
        self.treatment_key = treatment_key
        self.outcome = outcome
        super().__init__(f"Validation failed for run {treatment_key}: {outcome.describe()}")


class HarnessFailure(ExperimentError):
    """Raised when the timing harness fails for a treatment."""

    def __init__(self, treatment_key: str, cause: BaseException):
        self.treatment_key = treatment_key
        self.cause = cause
        super().__init__(
            f"Timing harness failed for run {treatment_key}: "
            f"{type(cause).__name__}: {cause}"
        )


class UnknownExperiment(ExperimentError, ValueError):
    """Raised when an experiment name is not registered."""
    pass


class InvalidExpectedOutput(ExperimentError, TypeError):
    """Raised when expected_output returns something other than Expected or None."""

    def __init__(self, treatment_key: str, expected: Any):
        self.treatment_key = treatment_key
        self.expected = expected
        super().__init__(
            f"expected_output for run {treatment_key} returned "
            f"{type(expected).__name__} {expected!r}; wrap it in Expected(...) or return None"
        )
