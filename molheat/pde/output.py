"""
Continuous output of a method-of-lines run.

`ContinuousOutputModel` collects the dense interpolant of every accepted
step together with the boundary values recorded by the derivative
function, and answers queries for the interior state ``U(t)``, the full
nodal field and the interpolated field ``u(x, t)`` once the run is over.
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import QueryOutOfRangeError
from .mesh import MeshConfig

# Relative tolerance used to decide that two consecutive steps touch.
_CONTIGUITY_RTOL = 1e-12
# x / dx within this many ulps of an integer is read as that node.
_NODE_SNAP_ULPS = 4


class BoundarySample(NamedTuple):
    """Boundary values recorded during one derivative evaluation."""

    time: float
    left: float
    right: float


@dataclass(frozen=True)
class AcceptedStep:
    """
    Dense interpolant of one accepted step, valid on ``[t_start, t_end]``.

    ``interpolant`` maps a time inside the interval to the interior state;
    a ``scipy.integrate.DenseOutput`` fits this contract.
    """

    t_start: float
    t_end: float
    interpolant: Callable[[float], np.ndarray]

    @property
    def size(self) -> float:
        return self.t_end - self.t_start

    def __call__(self, t: float) -> np.ndarray:
        return np.asarray(self.interpolant(t), dtype=float)


class ContinuousOutputModel:
    """
    Ordered accepted steps plus boundary samples of a single run.

    The model is filled by the integrator with accepted steps
    (`append_step`) and the boundary samples of their stage evaluations
    (`record_boundary`), then sealed with `finalize`.
    Queries are allowed at any time but the statistics are only cached
    once the model is sealed.
    """

    def __init__(self, mesh: MeshConfig) -> None:
        self.mesh = mesh
        self._steps: List[AcceptedStep] = []
        self._step_ends: List[float] = []
        self._boundary_times: List[float] = []
        self._boundary_values: List[Tuple[float, float]] = []
        self._finished = False
        self._average_step: Optional[float] = None

    # ------------------------------------------------------------------
    # population
    def append_step(self, step: AcceptedStep) -> None:
        """Register the next accepted step; steps must tile the time axis."""
        self._ensure_mutable()
        if not step.t_end > step.t_start:
            raise ValueError(f"Accepted step must have positive length, got [{step.t_start}, {step.t_end}].")
        if self._steps:
            previous_end = self._step_ends[-1]
            scale = max(abs(previous_end), abs(step.t_start), 1.0)
            if abs(step.t_start - previous_end) > _CONTIGUITY_RTOL * scale:
                raise ValueError(
                    f"Accepted step starting at {step.t_start!r} does not continue "
                    f"the previous step ending at {previous_end!r}."
                )
        self._steps.append(step)
        self._step_ends.append(step.t_end)

    def record_boundary(self, t: float, left: float, right: float) -> None:
        """Store a boundary sample; a repeated time overwrites the earlier sample."""
        self._ensure_mutable()
        t = float(t)
        index = bisect.bisect_left(self._boundary_times, t)
        if index < len(self._boundary_times) and self._boundary_times[index] == t:
            self._boundary_values[index] = (float(left), float(right))
        else:
            self._boundary_times.insert(index, t)
            self._boundary_values.insert(index, (float(left), float(right)))

    def finalize(self) -> None:
        """Seal the model; later mutation raises ``RuntimeError``."""
        self._finished = True
        self._average_step = None

    def _ensure_mutable(self) -> None:
        if self._finished:
            raise RuntimeError("ContinuousOutputModel is read-only once integration has finished.")

    # ------------------------------------------------------------------
    # inspection
    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def steps(self) -> Sequence[AcceptedStep]:
        return tuple(self._steps)

    @property
    def t_start(self) -> float:
        self._require_steps()
        return self._steps[0].t_start

    @property
    def t_end(self) -> float:
        self._require_steps()
        return self._step_ends[-1]

    @property
    def step_times(self) -> np.ndarray:
        """Start time of each accepted step."""
        return np.array([step.t_start for step in self._steps], dtype=float)

    @property
    def boundary_samples(self) -> List[BoundarySample]:
        return [
            BoundarySample(t, left, right)
            for t, (left, right) in zip(self._boundary_times, self._boundary_values)
        ]

    def step_count(self) -> int:
        return len(self._steps)

    def average_step_size(self) -> float:
        """
        Mean difference between consecutive accepted-step start times.

        Zero for a single step. The value is cached once the model is
        finalized, since the step sequence can no longer change.
        """
        if self._average_step is not None:
            return self._average_step
        times = self.step_times
        average = float(np.mean(np.diff(times))) if times.size > 1 else 0.0
        if self._finished:
            self._average_step = average
        return average

    def total_grid_size(self) -> int:
        """Number of (x, t) vertices: steps times mesh points."""
        return self.step_count() * self.mesh.number_of_mesh_points

    # ------------------------------------------------------------------
    # queries
    def _require_steps(self) -> None:
        if not self._steps:
            raise RuntimeError("ContinuousOutputModel holds no accepted steps.")

    def sample(self, t: float) -> np.ndarray:
        """
        Interior state ``U(t)`` from the dense interpolant covering ``t``.

        Raises
        ------
        QueryOutOfRangeError
            If ``t`` lies outside ``[t_start, t_end]``.
        """
        self._require_steps()
        t = float(t)
        if not (self.t_start <= t <= self.t_end):
            raise QueryOutOfRangeError("t", t, self.t_start, self.t_end)
        index = bisect.bisect_left(self._step_ends, t)
        return self._steps[index](t)

    def boundary_at(self, t: float) -> Tuple[float, float]:
        """
        Boundary values at ``t``, linearly interpolated between the nearest
        recorded samples below and above.

        Raises
        ------
        QueryOutOfRangeError
            If no boundary sample has been recorded.
        """
        times = self._boundary_times
        t = float(t)
        if not times:
            raise QueryOutOfRangeError("t", t)
        high = bisect.bisect_left(times, t)
        if high < len(times) and times[high] == t:
            return self._boundary_values[high]
        low = high - 1
        if low < 0:
            return self._boundary_values[high]
        if high >= len(times):
            return self._boundary_values[low]
        t_low, t_high = times[low], times[high]
        w = (t - t_low) / (t_high - t_low)
        (left_low, right_low), (left_high, right_high) = self._boundary_values[low], self._boundary_values[high]
        return (
            (1.0 - w) * left_low + w * left_high,
            (1.0 - w) * right_low + w * right_high,
        )

    def full_state(self, t: float) -> np.ndarray:
        """Nodal field at ``t`` including both boundary nodes (length ``J``)."""
        interior = self.sample(t)
        left, right = self.boundary_at(t)
        state = np.empty(self.mesh.number_of_mesh_points, dtype=float)
        state[0] = left
        state[1:-1] = interior
        state[-1] = right
        return state

    def field_at(self, x: float, t: float) -> float:
        """
        ``u(x, t)`` by linear interpolation between the two nodes around ``x``.

        Raises
        ------
        QueryOutOfRangeError
            If ``x`` is outside [0, 1] or ``t`` outside the solved interval.
        """
        x = float(x)
        if not (0.0 <= x <= 1.0):
            raise QueryOutOfRangeError("x", x, 0.0, 1.0)
        state = self.full_state(t)
        last = self.mesh.number_of_mesh_points - 1
        position = x / self.mesh.delta_x
        nearest = round(position)
        if abs(position - nearest) <= _NODE_SNAP_ULPS * math.ulp(max(nearest, 1)):
            position = float(nearest)
        # min() absorbs rounding of x / dx just above the last node.
        x0 = min(math.floor(position), last)
        x1 = min(math.ceil(position), last)
        if x0 == x1:
            return float(state[x0])
        w = position - x0
        return float(state[x0] * (1.0 - w) + state[x1] * w)

    def sample_surface(self, xs: Sequence[float], ts: Sequence[float]) -> np.ndarray:
        """
        Evaluate ``u`` on the grid ``ts x xs``.

        Returns
        -------
        np.ndarray
            Array of shape ``(len(ts), len(xs))``.
        """
        xs = np.asarray(xs, dtype=float)
        ts = np.asarray(ts, dtype=float)
        if xs.size and (xs.min() < 0.0 or xs.max() > 1.0):
            bad = xs.min() if xs.min() < 0.0 else xs.max()
            raise QueryOutOfRangeError("x", float(bad), 0.0, 1.0)
        nodes = self.mesh.nodes
        surface = np.empty((ts.size, xs.size), dtype=float)
        for i, t in enumerate(ts):
            surface[i] = np.interp(xs, nodes, self.full_state(float(t)))
        return surface


__all__ = ["AcceptedStep", "BoundarySample", "ContinuousOutputModel"]
