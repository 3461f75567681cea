"""Benchmark heat-equation solves across mesh sizes and tolerances."""

import math
import time
from typing import Dict

from molheat import SolverOptions, solve_heat


def benchmark_solve(
    number_of_mesh_points: int,
    tolerance: float = 1e-8,
    t1: float = 0.1,
    method: str = "DOP853",
    repeats: int = 3,
) -> Dict[str, float]:
    """Benchmark a Dirichlet sin(pi x) solve.

    Args:
        number_of_mesh_points: Mesh size J.
        tolerance: Relative and absolute tolerance.
        t1: End of the integration interval.
        method: Embedded Runge-Kutta pair.
        repeats: Number of timed solves.

    Returns:
        Dictionary with timing results and step statistics.
    """
    options = SolverOptions(
        number_of_mesh_points=number_of_mesh_points,
        rel_tol=tolerance,
        abs_tol=tolerance,
        t1=t1,
        method=method,
    )

    def initial(x: float) -> float:
        return math.sin(math.pi * x)

    def zero(t: float) -> float:
        return 0.0

    start = time.perf_counter()
    for _ in range(repeats):
        result = solve_heat(initial, zero, zero, options=options)
    end = time.perf_counter()

    exact = math.exp(-(math.pi**2) * t1)
    return {
        "number_of_mesh_points": number_of_mesh_points,
        "time_per_solve_sec": (end - start) / repeats,
        "steps": result.step_count(),
        "average_step": result.average_step_size(),
        "error_at_center": abs(result.field_at(0.5, t1) - exact),
    }


if __name__ == "__main__":
    print("Benchmarking heat equation solves...")

    for method in ("DOP853", "RK45"):
        for j in (10, 25, 50, 100):
            results = benchmark_solve(j, method=method)
            print(f"{method} J={j}:")
            print(f"  Time per solve: {results['time_per_solve_sec']*1e3:.2f} ms")
            print(f"  Steps: {results['steps']} (average {results['average_step']:.3e})")
            print(f"  Error at x=0.5: {results['error_at_center']:.3e}")
