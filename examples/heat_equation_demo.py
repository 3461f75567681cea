"""
Example: the 1D heat equation by the method of lines

Solves u_t = u_xx on [0, 1] twice, once with fixed boundary values and
once with fixed boundary fluxes, starting from the front end's default
inputs, and prints the same run statistics the interactive tool shows.
"""

import math

from molheat import SolverOptions, parse_function, solve_heat


def print_statistics(title, result):
    summary = result.summary()
    print("=" * 60)
    print(title)
    print("=" * 60)
    print(f"Time taken: {summary['elapsed_ms']:.1f} ms")
    print(f"Number of steps in t: {summary['steps']} steps")
    print(f"Average step size: {summary['average_step']:e}")
    print(f"Total grid size: {summary['total_grid_size']} vertices")


def example_dirichlet():
    """u(0,t)=0, u(1,t)=1 with u(x,0)=sin(pi x/2)."""
    options = SolverOptions.from_mapping(
        {"number_of_mesh_points": "10", "rel_tol": "1e-8", "abs_tol": "1e-8", "t1": "0.5"}
    )
    result = solve_heat(
        parse_function("sin(pi*x/2)", "x"),
        parse_function("0", "t"),
        parse_function("1", "t"),
        kind="dirichlet",
        options=options,
    )
    print_statistics("Dirichlet boundary conditions", result)
    for x in (0.0, 0.25, 0.5, 0.75, 1.0):
        print(f"  u({x:.2f}, 0.5) = {result.field_at(x, 0.5): .6f}")
    print()


def example_neumann():
    """du/dx(0,t)=0, du/dx(1,t)=-1: heat leaves through the right edge."""
    result = solve_heat(
        parse_function("sin(pi*x/2)", "x"),
        parse_function("0", "t"),
        parse_function("-1", "t"),
        kind="neumann",
        number_of_mesh_points=40,
        t1=0.5,
    )
    print_statistics("Von Neumann boundary conditions", result)
    heat = sum(result.field_at(x, 0.5) for x in (i / 100 for i in range(101))) / 101
    print(f"  mean temperature at t=0.5: {heat:.6f} (initially {2 / math.pi:.6f})")
    print()


if __name__ == "__main__":
    example_dirichlet()
    example_neumann()
    print("Done.")
