"""
Uniform mesh on the unit interval.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class MeshConfig:
    """
    Uniform grid of ``number_of_mesh_points`` nodes on [0, 1].

    The two boundary nodes are not integrated; the ODE system has
    ``dimension = J - 2`` unknowns located at ``x_i = (i + 1) * delta_x``.
    """

    number_of_mesh_points: int

    def __post_init__(self) -> None:
        j = self.number_of_mesh_points
        if isinstance(j, bool) or not isinstance(j, (int, np.integer)):
            raise InvalidParameterError("number_of_mesh_points", j, "expected an integer")
        if j < 4:
            raise InvalidParameterError("number_of_mesh_points", j, "at least 4 mesh points are required")
        object.__setattr__(self, "number_of_mesh_points", int(j))

    @property
    def delta_x(self) -> float:
        return 1.0 / (self.number_of_mesh_points - 1)

    @property
    def delta_x_inv2(self) -> float:
        return 1.0 / (self.delta_x * self.delta_x)

    @property
    def dimension(self) -> int:
        """Number of interior unknowns."""
        return self.number_of_mesh_points - 2

    @property
    def nodes(self) -> np.ndarray:
        """All node coordinates, both boundaries included."""
        return np.linspace(0.0, 1.0, self.number_of_mesh_points)

    @property
    def interior_points(self) -> np.ndarray:
        """Coordinates of the integrated unknowns."""
        return (np.arange(self.dimension, dtype=float) + 1.0) * self.delta_x
