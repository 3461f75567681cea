"""Error taxonomy shared by the configuration layer and the numerical core.

Every error derives from :class:`MolHeatError` and from the builtin type a
caller would naturally expect (``ValueError`` for bad input,
``RuntimeError`` for failures during a run), so generic handlers keep
working.
"""

from __future__ import annotations

from typing import Optional


class MolHeatError(Exception):
    """Base class for all molheat errors."""


class InvalidParameterError(MolHeatError, ValueError):
    """A numeric parameter is malformed or out of range.

    Raised before any integration is attempted.
    """

    def __init__(self, parameter: str, value: object, reason: str) -> None:
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for parameter '{parameter}': {reason}")


class EvaluationError(MolHeatError, RuntimeError):
    """A user supplied initial or boundary function failed to evaluate."""

    def __init__(self, function: str, argument: float, reason: str) -> None:
        self.function = function
        self.argument = argument
        self.reason = reason
        super().__init__(f"Evaluation of {function} function at {argument!r} failed: {reason}")


class IntegrationError(MolHeatError, RuntimeError):
    """The adaptive integrator could not advance the solution."""

    def __init__(
        self,
        message: str,
        last_time: float,
        last_step: Optional[float] = None,
    ) -> None:
        self.reason = message
        self.last_time = last_time
        self.last_step = last_step
        detail = f"last accepted time {last_time!r}"
        if last_step is not None:
            detail += f", last step size {last_step!r}"
        super().__init__(f"{message} ({detail})")


class QueryOutOfRangeError(MolHeatError, ValueError):
    """A query on a continuous output model lies outside the solved domain."""

    def __init__(self, name: str, value: float, low: Optional[float] = None, high: Optional[float] = None) -> None:
        self.name = name
        self.value = value
        self.low = low
        self.high = high
        if low is None or high is None:
            message = f"{name}={value!r} cannot be answered, nothing has been recorded"
        else:
            message = f"{name}={value!r} lies outside the solved range [{low!r}, {high!r}]"
        super().__init__(message)


__all__ = [
    "MolHeatError",
    "InvalidParameterError",
    "EvaluationError",
    "IntegrationError",
    "QueryOutOfRangeError",
]
