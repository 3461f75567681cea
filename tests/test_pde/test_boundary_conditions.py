from __future__ import annotations

import math

import numpy as np
import pytest

from molheat.exceptions import EvaluationError, InvalidParameterError
from molheat.pde import (
    BoundaryFunctions,
    BoundaryKind,
    FixedFluxBoundary,
    FixedValueBoundary,
    MeshConfig,
    make_boundary_scheme,
)


def _functions(left, right) -> BoundaryFunctions:
    return BoundaryFunctions(initial=lambda x: 0.0, left=left, right=right)


def test_fixed_value_ghosts_are_the_boundary_data() -> None:
    mesh = MeshConfig(6)
    scheme = FixedValueBoundary(_functions(lambda t: 2.0 * t, lambda t: 1.0 - t), mesh)
    left, right = scheme.ghost_values(0.25, np.array([9.0, 9.0, 9.0, 9.0]))
    assert left == pytest.approx(0.5)
    assert right == pytest.approx(0.75)


def test_fixed_flux_ghosts_use_one_sided_second_order_stencil() -> None:
    mesh = MeshConfig(6)
    dx = mesh.delta_x
    u = np.array([1.0, 2.0, 3.0, 5.0])
    scheme = FixedFluxBoundary(_functions(lambda t: 0.5, lambda t: -1.0), mesh)
    left, right = scheme.ghost_values(0.0, u)
    assert left == pytest.approx((-2.0 * dx * 0.5 + 4.0 * 1.0 - 2.0) / 3.0)
    assert right == pytest.approx((2.0 * dx * -1.0 - 3.0 + 4.0 * 5.0) / 3.0)


def test_fixed_flux_reproduces_linear_profile() -> None:
    # u(x) = 2 + 3x has du/dx = 3 everywhere; the ghost values must be exact.
    mesh = MeshConfig(9)
    u = 2.0 + 3.0 * mesh.interior_points
    scheme = FixedFluxBoundary(_functions(lambda t: 3.0, lambda t: 3.0), mesh)
    left, right = scheme.ghost_values(0.0, u)
    assert left == pytest.approx(2.0)
    assert right == pytest.approx(5.0)


def test_fixed_flux_reproduces_quadratic_profile() -> None:
    # Second-order one-sided differences are exact for quadratics.
    mesh = MeshConfig(7)
    u = mesh.interior_points**2
    scheme = FixedFluxBoundary(_functions(lambda t: 0.0, lambda t: 2.0), mesh)
    left, right = scheme.ghost_values(0.0, u)
    assert left == pytest.approx(0.0, abs=1e-12)
    assert right == pytest.approx(1.0)


def test_make_boundary_scheme_selects_variant() -> None:
    mesh = MeshConfig(5)
    functions = _functions(lambda t: 0.0, lambda t: 0.0)
    assert isinstance(make_boundary_scheme("dirichlet", functions, mesh), FixedValueBoundary)
    assert isinstance(make_boundary_scheme("Neumann", functions, mesh), FixedFluxBoundary)
    assert isinstance(make_boundary_scheme(BoundaryKind.FIXED_FLUX, functions, mesh), FixedFluxBoundary)


@pytest.mark.parametrize(
    ("text", "kind"),
    [
        ("fixed-value", BoundaryKind.FIXED_VALUE),
        ("VALUE", BoundaryKind.FIXED_VALUE),
        ("von neumann", BoundaryKind.FIXED_FLUX),
        ("fixed_flux", BoundaryKind.FIXED_FLUX),
    ],
)
def test_boundary_kind_aliases(text: str, kind: BoundaryKind) -> None:
    assert BoundaryKind.parse(text) is kind


def test_boundary_kind_rejects_unknown_family() -> None:
    with pytest.raises(InvalidParameterError):
        BoundaryKind.parse("robin")


def test_failing_boundary_function_reports_time_and_name() -> None:
    mesh = MeshConfig(5)
    scheme = FixedValueBoundary(_functions(lambda t: math.log(t - 1.0), lambda t: 0.0), mesh)
    with pytest.raises(EvaluationError) as excinfo:
        scheme.ghost_values(0.5, np.zeros(3))
    assert excinfo.value.function == "left"
    assert excinfo.value.argument == 0.5


def test_non_finite_boundary_value_is_an_evaluation_error() -> None:
    functions = _functions(lambda t: 0.0, lambda t: float("inf"))
    with pytest.raises(EvaluationError) as excinfo:
        functions.evaluate("right", 1.0)
    assert "non-finite" in str(excinfo.value)
