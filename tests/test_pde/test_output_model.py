from __future__ import annotations

import numpy as np
import pytest

from molheat.exceptions import QueryOutOfRangeError
from molheat.pde import AcceptedStep, ContinuousOutputModel, MeshConfig


def _linear_in_time(t_start: float, t_end: float, slope: np.ndarray) -> AcceptedStep:
    return AcceptedStep(t_start, t_end, lambda t: slope * t)


def _model_with_steps(times, mesh: MeshConfig | None = None) -> ContinuousOutputModel:
    mesh = mesh or MeshConfig(5)
    model = ContinuousOutputModel(mesh)
    slope = np.arange(1.0, mesh.dimension + 1.0)
    for t_start, t_end in zip(times[:-1], times[1:]):
        model.append_step(_linear_in_time(t_start, t_end, slope))
    return model


def test_boundary_samples_are_linearly_interpolated() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    model.append_step(AcceptedStep(0.0, 1.0, lambda t: np.zeros(2)))
    model.record_boundary(0.0, 0.0, 0.0)
    model.record_boundary(1.0, 2.0, 4.0)
    state = model.full_state(0.5)
    assert state[0] == pytest.approx(1.0)
    assert state[-1] == pytest.approx(2.0)


def test_boundary_lookup_uses_nearest_samples_only() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    for t, left, right in [(0.0, 0.0, 0.0), (0.4, 4.0, -4.0), (1.0, 10.0, 0.0)]:
        model.record_boundary(t, left, right)
    assert model.boundary_at(0.2) == pytest.approx((2.0, -2.0))
    assert model.boundary_at(0.4) == (4.0, -4.0)
    assert model.boundary_at(0.7) == pytest.approx((7.0, -2.0))


def test_single_sided_boundary_lookup_returns_that_sample() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    model.record_boundary(0.5, 1.0, 2.0)
    assert model.boundary_at(0.0) == (1.0, 2.0)
    assert model.boundary_at(0.9) == (1.0, 2.0)


def test_repeated_boundary_time_keeps_last_write() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    model.record_boundary(0.5, 1.0, 1.0)
    model.record_boundary(0.5, 3.0, 5.0)
    assert len(model.boundary_samples) == 1
    assert model.boundary_at(0.5) == (3.0, 5.0)


def test_sample_picks_the_step_containing_t() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    model.append_step(AcceptedStep(0.0, 0.5, lambda t: np.array([1.0, 1.0])))
    model.append_step(AcceptedStep(0.5, 1.0, lambda t: np.array([2.0, 2.0])))
    assert np.array_equal(model.sample(0.0), [1.0, 1.0])
    assert np.array_equal(model.sample(0.25), [1.0, 1.0])
    assert np.array_equal(model.sample(0.5), [1.0, 1.0])
    assert np.array_equal(model.sample(0.75), [2.0, 2.0])
    assert np.array_equal(model.sample(1.0), [2.0, 2.0])


def test_sample_outside_integrated_interval_is_rejected() -> None:
    model = _model_with_steps([0.0, 0.5, 1.0])
    with pytest.raises(QueryOutOfRangeError):
        model.sample(-1e-9)
    with pytest.raises(QueryOutOfRangeError):
        model.sample(1.0 + 1e-9)


def test_full_state_has_all_mesh_points() -> None:
    mesh = MeshConfig(7)
    model = _model_with_steps([0.0, 0.3, 1.0], mesh)
    model.record_boundary(0.0, -1.0, 1.0)
    for t in np.linspace(0.0, 1.0, 11):
        assert model.full_state(t).shape == (mesh.dimension + 2,)


def test_field_at_returns_exact_node_values() -> None:
    mesh = MeshConfig(5)
    model = _model_with_steps([0.0, 1.0], mesh)
    model.record_boundary(0.0, -1.0, 9.0)
    state = model.full_state(1.0)
    for index, x in enumerate(mesh.nodes):
        assert model.field_at(x, 1.0) == state[index]


def test_field_at_is_exact_at_rounded_node_multiples(rng: np.random.Generator) -> None:
    mesh = MeshConfig(50)
    interior = rng.standard_normal(mesh.dimension)
    model = ContinuousOutputModel(mesh)
    model.append_step(AcceptedStep(0.0, 1.0, lambda t: interior))
    model.record_boundary(0.0, 0.3, -0.7)
    state = model.full_state(0.5)
    # Several k * dx / dx land one ulp off an integer at this mesh size.
    for k in range(mesh.number_of_mesh_points - 1):
        assert model.field_at(k * mesh.delta_x, 0.5) == state[k]
    assert model.field_at(1.0, 0.5) == state[-1]


def test_field_at_interpolates_between_nodes() -> None:
    mesh = MeshConfig(5)
    model = _model_with_steps([0.0, 1.0], mesh)
    model.record_boundary(1.0, 0.0, 4.0)
    # Full state at t=1 is [0, 1, 2, 3, 4] on nodes 0, 0.25, ..., 1.
    assert model.field_at(0.125, 1.0) == pytest.approx(0.5)
    assert model.field_at(0.6, 1.0) == pytest.approx(2.4)


@pytest.mark.parametrize("x", [-0.01, 1.01])
def test_field_at_rejects_points_outside_domain(x: float) -> None:
    model = _model_with_steps([0.0, 1.0])
    model.record_boundary(0.0, 0.0, 0.0)
    with pytest.raises(QueryOutOfRangeError):
        model.field_at(x, 0.5)


def test_queries_are_bit_identical_on_repeat() -> None:
    model = _model_with_steps([0.0, 0.2, 0.7, 1.0])
    model.record_boundary(0.0, 0.0, 0.0)
    model.record_boundary(1.0, 1.0, 3.0)
    model.finalize()
    assert np.array_equal(model.sample(0.33), model.sample(0.33))
    assert model.field_at(0.41, 0.66) == model.field_at(0.41, 0.66)


def test_steps_must_be_contiguous() -> None:
    model = _model_with_steps([0.0, 0.5])
    with pytest.raises(ValueError):
        model.append_step(AcceptedStep(0.6, 1.0, lambda t: np.zeros(3)))
    with pytest.raises(ValueError):
        model.append_step(AcceptedStep(0.5, 0.5, lambda t: np.zeros(3)))


def test_finalized_model_is_read_only() -> None:
    model = _model_with_steps([0.0, 1.0])
    model.finalize()
    assert model.finished
    with pytest.raises(RuntimeError):
        model.append_step(AcceptedStep(1.0, 2.0, lambda t: np.zeros(3)))
    with pytest.raises(RuntimeError):
        model.record_boundary(0.5, 0.0, 0.0)


def test_step_statistics() -> None:
    model = _model_with_steps([0.0, 0.1, 0.3, 0.6, 1.0])
    model.finalize()
    assert model.step_count() == 4
    assert np.allclose(model.step_times, [0.0, 0.1, 0.3, 0.6])
    assert model.average_step_size() == pytest.approx(np.mean(np.diff(model.step_times)))
    assert model.average_step_size() == pytest.approx(0.6 / 3)
    assert model.total_grid_size() == 4 * 5


def test_average_step_is_zero_for_a_single_step() -> None:
    model = _model_with_steps([0.0, 1.0])
    assert model.step_count() == 1
    assert model.average_step_size() == 0.0


def test_empty_model_cannot_be_queried() -> None:
    model = ContinuousOutputModel(MeshConfig(4))
    with pytest.raises(RuntimeError):
        model.sample(0.0)
    with pytest.raises(QueryOutOfRangeError):
        model.boundary_at(0.0)


def test_sample_surface_matches_field_at() -> None:
    model = _model_with_steps([0.0, 0.5, 1.0])
    model.record_boundary(0.0, 1.0, -1.0)
    model.record_boundary(1.0, 2.0, 0.0)
    xs = np.linspace(0.0, 1.0, 7)
    ts = np.array([0.0, 0.4, 1.0])
    surface = model.sample_surface(xs, ts)
    assert surface.shape == (3, 7)
    for i, t in enumerate(ts):
        for j, x in enumerate(xs):
            assert surface[i, j] == pytest.approx(model.field_at(x, t))
