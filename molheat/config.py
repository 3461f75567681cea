"""
Solver configuration.

`SolverOptions` collects the scalar inputs of a run: mesh size, tolerances,
time interval and step bounds. Validation happens on construction so a
malformed option surfaces as `InvalidParameterError` before any work is
done. `SolverOptions.from_mapping` accepts raw user input (strings from a
form, numbers from a config dict) and parses it field by field.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from .exceptions import InvalidParameterError

_METHODS = ("DOP853", "RK45", "RK23")


def _parse_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(name, value, "expected a real number")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidParameterError(name, value, "expected a real number")
        value = text
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(name, value, "expected a real number") from None
    if not math.isfinite(result):
        raise InvalidParameterError(name, value, "must be finite")
    return result


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidParameterError(name, value, "expected an integer")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidParameterError(name, value, "expected an integer")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise InvalidParameterError(name, value, "expected an integer") from None
    raise InvalidParameterError(name, value, "expected an integer")


@dataclass(frozen=True)
class SolverOptions:
    """
    Scalar parameters of a heat-equation solve.

    Defaults reproduce the values the interactive front end starts with.

    Parameters
    ----------
    number_of_mesh_points:
        Total number of grid nodes J, boundary nodes included (J >= 4).
    rel_tol, abs_tol:
        Relative and absolute tolerances of the adaptive integrator.
    t0, t1:
        Integration interval, ``t1 > t0``.
    min_step, max_step:
        Bounds on the accepted step size.
    method:
        Embedded Runge-Kutta pair, one of ``"DOP853"``, ``"RK45"``,
        ``"RK23"``.
    """

    number_of_mesh_points: int = 10
    rel_tol: float = 1e-8
    abs_tol: float = 1e-8
    t0: float = 0.0
    t1: float = 0.5
    min_step: float = 1e-12
    max_step: float = 100.0
    method: str = "DOP853"

    def __post_init__(self) -> None:
        j = _parse_int("number_of_mesh_points", self.number_of_mesh_points)
        if j < 4:
            raise InvalidParameterError("number_of_mesh_points", j, "at least 4 mesh points are required")

        rel_tol = _parse_float("rel_tol", self.rel_tol)
        abs_tol = _parse_float("abs_tol", self.abs_tol)
        if rel_tol < 0.0:
            raise InvalidParameterError("rel_tol", rel_tol, "must be non-negative")
        if abs_tol < 0.0:
            raise InvalidParameterError("abs_tol", abs_tol, "must be non-negative")
        if rel_tol == 0.0 and abs_tol == 0.0:
            raise InvalidParameterError("rel_tol", rel_tol, "rel_tol and abs_tol cannot both be zero")

        t0 = _parse_float("t0", self.t0)
        t1 = _parse_float("t1", self.t1)
        if t1 <= t0:
            raise InvalidParameterError("t1", t1, f"must be greater than t0={t0!r}")

        min_step = _parse_float("min_step", self.min_step)
        max_step = _parse_float("max_step", self.max_step)
        if min_step <= 0.0:
            raise InvalidParameterError("min_step", min_step, "must be positive")
        if max_step < min_step:
            raise InvalidParameterError("max_step", max_step, f"must be at least min_step={min_step!r}")

        method = str(self.method).strip().upper()
        if method not in _METHODS:
            raise InvalidParameterError("method", self.method, f"expected one of {', '.join(_METHODS)}")

        # Store the normalized values on the frozen instance.
        object.__setattr__(self, "number_of_mesh_points", j)
        object.__setattr__(self, "rel_tol", rel_tol)
        object.__setattr__(self, "abs_tol", abs_tol)
        object.__setattr__(self, "t0", t0)
        object.__setattr__(self, "t1", t1)
        object.__setattr__(self, "min_step", min_step)
        object.__setattr__(self, "max_step", max_step)
        object.__setattr__(self, "method", method)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SolverOptions":
        """
        Build options from raw input, e.g. text fields or a parsed config file.

        Missing keys fall back to the defaults; unknown keys are rejected.
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameterError(unknown[0], data[unknown[0]], "unknown option")
        return cls(**dict(data))

    @property
    def t_range(self) -> tuple[float, float]:
        return (self.t0, self.t1)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["SolverOptions"]
