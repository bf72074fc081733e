"""
Validation of a treatment's output against the expected output and a custom hook.

Validation runs once per treatment, outside of timing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class ValidationStatus(Enum):
    """Outcome of validating one output."""
    PASSED = "passed"
    MISMATCH = "mismatch"          # Output differs from the expected output
    HOOK_FAILED = "hook_failed"    # Custom validation hook raised


@dataclass(frozen=True)
class Expected:
    """
    Expected output of a treatment.

    Wrapping the value lets ``None`` be a legitimate expected output, while an
    ``expected_output`` returning plain ``None`` means "no oracle".
    """
    value: Any


@dataclass
class ValidationOutcome:
    """Result of a validation, with diagnostics on failure."""
    status: ValidationStatus
    actual: Any = None
    expected: Optional[Expected] = None
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.status == ValidationStatus.PASSED

    def describe(self) -> str:
        """Human-readable diagnostic."""
        if self.status == ValidationStatus.MISMATCH:
            return (
                f"output is not equal to expected output. "
                f"Expected: {self.expected.value!r}, actual: {self.actual!r}"
            )
        if self.status == ValidationStatus.HOOK_FAILED:
            return f"output validation hook failed: {self.message}"
        return "passed"


ValidationHook = Callable[[Any, Any, Any], None]


def validate(
    expected: Optional[Expected],
    actual: Any,
    hook: Optional[ValidationHook] = None,
    input_levels: Any = None,
    input: Any = None,
) -> ValidationOutcome:
    """
    Validate an output.

    Args:
        expected: Expected output, or None to skip the equality check
        actual: Output produced by the algorithm variant
        hook: Optional callable ``hook(input_levels, input, actual)`` that
            raises (typically AssertionError) when the output is invalid
        input_levels: Input factor levels, passed to the hook
        input: Input instance, passed to the hook

    Returns:
        ValidationOutcome; PASSED when neither an oracle nor a hook is given

    Raises:
        TypeError: If ``expected`` is neither None nor an Expected
    """
    if expected is not None and not isinstance(expected, Expected):
        raise TypeError(
            f"expected output must be wrapped in Expected(...) or be None, "
            f"got {type(expected).__name__}: {expected!r}"
        )

    mismatch = expected is not None and not (actual == expected.value)

    # The hook always runs; an oracle mismatch takes precedence in the outcome
    hook_error = None
    if hook is not None:
        try:
            hook(input_levels, input, actual)
        except Exception as e:
            hook_error = str(e) or type(e).__name__

    if mismatch:
        return ValidationOutcome(
            status=ValidationStatus.MISMATCH,
            actual=actual,
            expected=expected,
            message=hook_error or "",
        )

    if hook_error is not None:
        return ValidationOutcome(
            status=ValidationStatus.HOOK_FAILED,
            actual=actual,
            expected=expected,
            message=hook_error,
        )

    return ValidationOutcome(
        status=ValidationStatus.PASSED,
        actual=actual,
        expected=expected,
    )
