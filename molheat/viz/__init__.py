"""Plotting helpers for solved heat problems."""

from .surface import plot_surface, surface_grid

__all__ = [
    "plot_surface",
    "surface_grid",
]
