"""Surface sampling and plotting of a solved heat problem.

`surface_grid` samples ``u(x, t)`` on an orthonormal grid and only needs
NumPy. `plot_surface` draws that grid as a 3-D surface with matplotlib,
an optional dependency.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np

from ..pde.output import ContinuousOutputModel
from ..pde.solver import SolveResult

# Type hints for matplotlib (optional dependency)
try:
    from matplotlib import pyplot as plt
    from matplotlib.axes import Axes
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    # Dummy type for type checking
    if False:
        from matplotlib.axes import Axes

Solved = Union[SolveResult, ContinuousOutputModel]


def _model_of(solved: Solved) -> ContinuousOutputModel:
    return solved.model if isinstance(solved, SolveResult) else solved


def surface_grid(
    solved: Solved,
    x_steps: int = 80,
    t_steps: int = 80,
    x_range: Tuple[float, float] = (0.0, 1.0),
    t_range: Optional[Tuple[float, float]] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sample ``u`` on a ``t_steps x x_steps`` grid.

    Parameters
    ----------
    solved:
        A `SolveResult` or a finished `ContinuousOutputModel`.
    x_steps, t_steps:
        Number of samples along each axis (at least 2).
    x_range:
        Spatial window, within [0, 1].
    t_range:
        Time window; defaults to the whole solved interval.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        ``(X, T, U)`` meshgrids of shape ``(t_steps, x_steps)``.
    """
    if x_steps < 2 or t_steps < 2:
        raise ValueError("x_steps and t_steps must be at least 2.")
    model = _model_of(solved)
    if t_range is None:
        t_range = (model.t_start, model.t_end)
    xs = np.linspace(x_range[0], x_range[1], int(x_steps))
    ts = np.linspace(t_range[0], t_range[1], int(t_steps))
    values = model.sample_surface(xs, ts)
    x_grid, t_grid = np.meshgrid(xs, ts)
    return x_grid, t_grid, values


def plot_surface(
    solved: Solved,
    x_steps: int = 80,
    t_steps: int = 80,
    wireframe: bool = True,
    ax: Optional["Axes"] = None,
) -> "Axes":
    """
    Plot ``u(x, t)`` as a coloured 3-D surface.

    Parameters
    ----------
    solved:
        A `SolveResult` or a finished `ContinuousOutputModel`.
    x_steps, t_steps:
        Grid resolution of the surface.
    wireframe:
        Draw black mesh lines on top of the faces.
    ax:
        Existing 3-D axes; a new figure is created when None.

    Returns
    -------
    matplotlib.axes.Axes
        The 3-D axes used for plotting.

    Raises
    ------
    RuntimeError
        If matplotlib is not installed.
    """
    if not HAS_MATPLOTLIB:
        raise RuntimeError(
            "matplotlib required for plotting; install with pip install matplotlib"
        )

    x_grid, t_grid, values = surface_grid(solved, x_steps=x_steps, t_steps=t_steps)

    if ax is None:
        fig = plt.figure(figsize=(6, 6))
        ax = fig.add_subplot(projection="3d")

    ax.plot_surface(
        x_grid,
        t_grid,
        values,
        cmap="RdYlGn_r",
        edgecolor="black" if wireframe else "none",
        linewidth=0.3 if wireframe else 0.0,
        vmin=float(values.min()),
        vmax=float(values.max()),
    )
    ax.set_xlabel("x")
    ax.set_ylabel("t")
    ax.set_zlabel("u(x, t)")
    return ax
