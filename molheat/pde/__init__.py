"""
Method-of-lines solver for the 1D heat equation ``u_t = u_xx`` on [0, 1].

The module provides:

* `MeshConfig` – uniform grid with ``J`` nodes; the ``J - 2`` interior
  values are the unknowns of the ODE system.
* `BoundaryFunctions` and the `BoundaryScheme` variants – Dirichlet
  (`FixedValueBoundary`) and Neumann (`FixedFluxBoundary`) ghost values.
* `HeatDerivative` – second-order central-difference right-hand side.
* `AdaptiveIntegrator` – embedded Runge-Kutta (Dormand-Prince 8(5,3) by
  default) with error control and dense output.
* `ContinuousOutputModel` – answers ``U(t)``, the full nodal field and
  ``u(x, t)`` after the run.
* `HeatProblem` / `solve_heat` – wire everything together and time the run.

Limitations: linear constant-coefficient diffusion, uniform 1D grid,
explicit time stepping on a single thread.

Example
-------
>>> import math
>>> from molheat.pde import BoundaryFunctions, HeatProblem
>>> from molheat.config import SolverOptions
>>>
>>> functions = BoundaryFunctions(
...     initial=lambda x: math.sin(math.pi * x),
...     left=lambda t: 0.0,
...     right=lambda t: 0.0,
... )
>>> options = SolverOptions(number_of_mesh_points=50, t1=0.1)
>>> result = HeatProblem(functions, "dirichlet", options).solve()
>>> result.full_state(0.05).shape
(50,)
"""

from .boundary import (
    BoundaryFunctions,
    BoundaryKind,
    BoundaryScheme,
    FixedFluxBoundary,
    FixedValueBoundary,
    make_boundary_scheme,
)
from .derivative import HeatDerivative
from .integrator import AdaptiveIntegrator, IntegratorState
from .mesh import MeshConfig
from .output import AcceptedStep, BoundarySample, ContinuousOutputModel
from .solver import HeatProblem, SolveResult, solve_heat

__all__ = [
    "AcceptedStep",
    "AdaptiveIntegrator",
    "BoundaryFunctions",
    "BoundaryKind",
    "BoundarySample",
    "BoundaryScheme",
    "ContinuousOutputModel",
    "FixedFluxBoundary",
    "FixedValueBoundary",
    "HeatDerivative",
    "HeatProblem",
    "IntegratorState",
    "MeshConfig",
    "SolveResult",
    "make_boundary_scheme",
    "solve_heat",
]
