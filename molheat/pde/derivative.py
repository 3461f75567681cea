"""
Right-hand side of the semi-discrete heat equation.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

import numpy as np

from ..exceptions import IntegrationError
from .boundary import BoundaryScheme
from .mesh import MeshConfig
from .output import BoundarySample


class BoundaryRecorder(Protocol):
    """Anything that accepts boundary samples, usually the output model."""

    def record_boundary(self, t: float, left: float, right: float) -> None: ...


class HeatDerivative:
    """
    ``F(t, U) = dU/dt`` for the interior unknowns.

    The state is padded into a scratch buffer ``V`` of length ``D + 2``
    with the ghost values from the boundary scheme, then the central
    difference ``(V[i] - 2 V[i+1] + V[i+2]) / dx^2`` is applied. The
    buffer is owned by this object and reused across calls; the returned
    derivative is always a fresh array because multi-stage integrators
    keep every stage.

    Each call appends ``(t, V[0], V[D+1])`` to a pending buffer. Stage
    evaluations of trial steps that the integrator later rejects produce
    samples too, so nothing reaches ``recorder`` until the integrator
    hands the samples of an accepted step back through `commit`.
    """

    def __init__(
        self,
        mesh: MeshConfig,
        scheme: BoundaryScheme,
        recorder: Optional[BoundaryRecorder] = None,
    ) -> None:
        self.mesh = mesh
        self.scheme = scheme
        self.recorder = recorder
        self._padded = np.zeros(mesh.dimension + 2, dtype=float)
        self._pending: List[BoundarySample] = []
        self.evaluations = 0

    @property
    def dimension(self) -> int:
        return self.mesh.dimension

    def initial_state(self) -> np.ndarray:
        """Initial profile sampled at the interior points."""
        functions = self.scheme.functions
        return np.array(
            [functions.evaluate("initial", float(x)) for x in self.mesh.interior_points],
            dtype=float,
        )

    def __call__(self, t: float, u: np.ndarray) -> np.ndarray:
        v = self._padded
        left, right = self.scheme.ghost_values(t, u)
        v[0] = left
        v[-1] = right
        v[1:-1] = u
        self.evaluations += 1

        self._pending.append(BoundarySample(float(t), float(left), float(right)))

        du = (v[:-2] - 2.0 * v[1:-1] + v[2:]) * self.mesh.delta_x_inv2
        if not np.all(np.isfinite(du)):
            raise IntegrationError(f"non-finite derivative evaluated at t={t!r}", last_time=float(t))
        return du

    def take_pending(self) -> List[BoundarySample]:
        """Samples of the calls since the last take, oldest first; clears the buffer."""
        pending, self._pending = self._pending, []
        return pending

    def commit(self, samples: Iterable[BoundarySample]) -> None:
        if self.recorder is None:
            return
        for sample in samples:
            self.recorder.record_boundary(sample.time, sample.left, sample.right)


__all__ = ["BoundaryRecorder", "HeatDerivative"]
