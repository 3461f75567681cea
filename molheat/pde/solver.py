"""
Assembly of a heat-equation run.

`HeatProblem` wires the pieces of a method-of-lines solve together:

1. `MeshConfig` from the number of mesh points,
2. a `BoundaryScheme` for the selected boundary family,
3. the `HeatDerivative` right-hand side, recording boundary samples into
4. a fresh `ContinuousOutputModel`, filled by
5. the `AdaptiveIntegrator`.

The wall-clock time of the integration call is measured here, around the
integrator, and returned with the model in a `SolveResult`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import numpy as np

from ..config import SolverOptions
from ..logging import get_logger
from .boundary import BoundaryFunctions, BoundaryKind, make_boundary_scheme
from .derivative import HeatDerivative
from .integrator import AdaptiveIntegrator
from .mesh import MeshConfig
from .output import ContinuousOutputModel

logger = get_logger(__name__)


@dataclass
class SolveResult:
    """Finished output model together with run statistics."""

    model: ContinuousOutputModel
    elapsed: float
    options: SolverOptions
    kind: BoundaryKind
    evaluations: int = 0

    def field_at(self, x: float, t: float) -> float:
        return self.model.field_at(x, t)

    def full_state(self, t: float) -> np.ndarray:
        return self.model.full_state(t)

    def step_count(self) -> int:
        return self.model.step_count()

    def average_step_size(self) -> float:
        return self.model.average_step_size()

    def summary(self) -> Dict[str, Any]:
        """Run statistics as shown next to a plot."""
        return {
            "boundary": self.kind.value,
            "elapsed_ms": self.elapsed * 1e3,
            "steps": self.step_count(),
            "average_step": self.average_step_size(),
            "total_grid_size": self.model.total_grid_size(),
            "derivative_evaluations": self.evaluations,
        }


@dataclass
class HeatProblem:
    """
    The heat equation ``u_t = u_xx`` on [0, 1] with initial and edge data.

    Parameters
    ----------
    functions:
        Initial profile and the two edge functions of time.
    kind:
        Boundary family, a `BoundaryKind` or ``"dirichlet"``/``"neumann"``.
    options:
        Mesh, tolerance and time-interval settings.
    """

    functions: BoundaryFunctions
    kind: BoundaryKind = BoundaryKind.FIXED_VALUE
    options: SolverOptions = field(default_factory=SolverOptions)

    def __post_init__(self) -> None:
        self.kind = BoundaryKind.parse(self.kind)

    def solve(self) -> SolveResult:
        options = self.options
        mesh = MeshConfig(options.number_of_mesh_points)
        scheme = make_boundary_scheme(self.kind, self.functions, mesh)
        model = ContinuousOutputModel(mesh)
        derivative = HeatDerivative(mesh, scheme, recorder=model)
        integrator = AdaptiveIntegrator(
            rel_tol=options.rel_tol,
            abs_tol=options.abs_tol,
            min_step=options.min_step,
            max_step=options.max_step,
            method=options.method,
        )

        logger.info(
            "Solving heat equation: %s boundaries, J=%d, t in [%g, %g]",
            self.kind.value,
            mesh.number_of_mesh_points,
            options.t0,
            options.t1,
        )
        y0 = derivative.initial_state()

        start = time.perf_counter()
        integrator.integrate(derivative, options.t0, y0, options.t1, model)
        elapsed = time.perf_counter() - start

        model.finalize()
        result = SolveResult(
            model=model,
            elapsed=elapsed,
            options=options,
            kind=self.kind,
            evaluations=derivative.evaluations,
        )
        logger.info(
            "Solved in %.3f ms with %d steps (average step %e)",
            elapsed * 1e3,
            result.step_count(),
            result.average_step_size(),
        )
        return result


def solve_heat(
    initial: Callable[[float], float],
    left: Callable[[float], float],
    right: Callable[[float], float],
    kind: BoundaryKind | str = BoundaryKind.FIXED_VALUE,
    options: Optional[SolverOptions] = None,
    **overrides: Any,
) -> SolveResult:
    """
    Solve the heat equation in one call.

    Keyword ``overrides`` are merged into ``options`` (or the defaults),
    e.g. ``solve_heat(f, g, h, number_of_mesh_points=50, t1=0.1)``.

    Example
    -------
    >>> import math
    >>> from molheat.pde import solve_heat
    >>> result = solve_heat(
    ...     lambda x: math.sin(math.pi * x),
    ...     lambda t: 0.0,
    ...     lambda t: 0.0,
    ...     number_of_mesh_points=50,
    ...     t1=0.1,
    ... )
    >>> round(result.field_at(0.5, 0.1), 3)
    0.373
    """
    if options is None:
        options = SolverOptions.from_mapping(overrides)
    elif overrides:
        options = SolverOptions.from_mapping({**options.to_dict(), **overrides})
    functions = BoundaryFunctions(initial=initial, left=left, right=right)
    return HeatProblem(functions=functions, kind=kind, options=options).solve()


__all__ = ["HeatProblem", "SolveResult", "solve_heat"]
