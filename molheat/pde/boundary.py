"""
Boundary-condition handling for the semi-discrete heat equation.

`BoundaryFunctions` stores the user data: the initial profile ``u(x, 0)``
and two time-dependent functions for the edges ``x = 0`` and ``x = 1``.
Their meaning depends on the `BoundaryKind`: a prescribed value
(Dirichlet) or a prescribed derivative ``du/dx`` (Neumann).

A `BoundaryScheme` turns that data into the two ghost values closing the
central-difference stencil at the first and last interior node.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, Tuple

from ..exceptions import EvaluationError, InvalidParameterError
from .mesh import MeshConfig

ScalarFunction = Callable[[float], float]


class BoundaryKind(Enum):
    """Boundary-condition family applied at both edges."""

    FIXED_VALUE = "dirichlet"
    FIXED_FLUX = "neumann"

    @classmethod
    def parse(cls, value: "BoundaryKind | str") -> "BoundaryKind":
        """Accept an enum member, its value, or a common alias."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {
            "dirichlet": cls.FIXED_VALUE,
            "fixed_value": cls.FIXED_VALUE,
            "value": cls.FIXED_VALUE,
            "neumann": cls.FIXED_FLUX,
            "von_neumann": cls.FIXED_FLUX,
            "fixed_flux": cls.FIXED_FLUX,
            "flux": cls.FIXED_FLUX,
        }
        try:
            return aliases[key]
        except KeyError:
            raise InvalidParameterError("boundary_kind", value, "expected 'dirichlet' or 'neumann'") from None


@dataclass(frozen=True)
class BoundaryFunctions:
    """Initial profile and edge data of a heat problem."""

    initial: ScalarFunction
    left: ScalarFunction
    right: ScalarFunction

    def evaluate(self, name: str, argument: float) -> float:
        """
        Evaluate one of the stored functions as a finite float.

        Parameters
        ----------
        name:
            ``"initial"``, ``"left"`` or ``"right"``.
        argument:
            ``x`` for the initial profile, ``t`` for the edges.

        Raises
        ------
        EvaluationError
            If the function raises or returns a non-finite value.
        """
        func = getattr(self, name)
        try:
            value = float(func(argument))
        except Exception as exc:
            raise EvaluationError(name, argument, f"{type(exc).__name__}: {exc}") from exc
        if not math.isfinite(value):
            raise EvaluationError(name, argument, f"non-finite value {value!r}")
        return value


class BoundaryScheme(ABC):
    """Computes the ghost values at both edges for a given time and state."""

    kind: BoundaryKind

    def __init__(self, functions: BoundaryFunctions, mesh: MeshConfig) -> None:
        self.functions = functions
        self.mesh = mesh

    @abstractmethod
    def ghost_values(self, t: float, u: Sequence[float]) -> Tuple[float, float]:
        """Return ``(left, right)`` values of the boundary nodes at time ``t``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(J={self.mesh.number_of_mesh_points})"


class FixedValueBoundary(BoundaryScheme):
    """Dirichlet data: the boundary nodes take the prescribed values."""

    kind = BoundaryKind.FIXED_VALUE

    def ghost_values(self, t: float, u: Sequence[float]) -> Tuple[float, float]:
        return self.functions.evaluate("left", t), self.functions.evaluate("right", t)


class FixedFluxBoundary(BoundaryScheme):
    """
    Neumann data ``du/dx = g`` eliminated with a one-sided second-order
    difference.

    At ``x = 0``: ``(-3 u_B + 4 u_0 - u_1) / (2 dx) = g_L``;
    at ``x = 1``: ``(3 u_B - 4 u_{D-1} + u_{D-2}) / (2 dx) = g_R``,
    solved for the boundary value ``u_B``.
    """

    kind = BoundaryKind.FIXED_FLUX

    def ghost_values(self, t: float, u: Sequence[float]) -> Tuple[float, float]:
        dx = self.mesh.delta_x
        g_left = self.functions.evaluate("left", t)
        g_right = self.functions.evaluate("right", t)
        left = (-2.0 * dx * g_left + 4.0 * u[0] - u[1]) / 3.0
        right = (2.0 * dx * g_right - u[-2] + 4.0 * u[-1]) / 3.0
        return float(left), float(right)


def make_boundary_scheme(
    kind: BoundaryKind | str,
    functions: BoundaryFunctions,
    mesh: MeshConfig,
) -> BoundaryScheme:
    """Select the scheme for ``kind`` once per run."""
    kind = BoundaryKind.parse(kind)
    if kind is BoundaryKind.FIXED_VALUE:
        return FixedValueBoundary(functions, mesh)
    return FixedFluxBoundary(functions, mesh)


__all__ = [
    "BoundaryFunctions",
    "BoundaryKind",
    "BoundaryScheme",
    "FixedFluxBoundary",
    "FixedValueBoundary",
    "make_boundary_scheme",
]
