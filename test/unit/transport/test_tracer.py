import math
import numpy as np
import pytest

####

import minray.object_.numba_types as type_

from minray.constant import INF, TRACE_BUDGET, TRACE_TRUNCATED, TRACE_VACUUM
from minray.main import preparation
from minray.object_.lattice import Lattice
from minray.object_.material import MaterialMG
from minray.object_.settings import Settings
from minray.object_.simulation import Simulation
from minray.transport.ray import sample_ray, set_ray
from minray.transport.tracer import grid_distance, trace_ray


def make_state(bc, N=2, length=2.0, distance_per_ray=10.0, max_intersections=0):
    lattice = Lattice(
        [MaterialMG(total=[1.0])], np.zeros((N, N), dtype=int), length, bc, bc, bc, bc
    )
    settings = Settings(
        N_ray=1,
        distance_per_ray=distance_per_ray,
        max_intersections_per_ray=max_intersections,
    )
    settings.set_eigenmode(N_inactive=0, N_active=1)
    state_arr, _, _, _ = preparation(Simulation(lattice, settings))
    return state_arr


def trace(state_arr, x, y, ux, uy):
    settings = state_arr[0]["settings"]
    ray_container = np.zeros(1, type_.ray)
    intersections = np.zeros(settings["max_intersections_per_ray"], type_.intersection)
    set_ray(ray_container, x, y, ux, uy, settings)
    N, termination = trace_ray(ray_container, intersections, settings)
    return ray_container, intersections[:N], termination


def test_grid_distance():
    assert grid_distance(0.25, 0.5, 0, 1.0) == pytest.approx(1.5)
    assert grid_distance(0.25, -0.5, 0, 1.0) == pytest.approx(0.5)
    assert grid_distance(0.25, 0.0, 0, 1.0) == INF
    assert grid_distance(0.25, 1e-14, 0, 1.0) == INF


def test_vacuum_exit_two_cells():
    state_arr = make_state("vacuum")
    _, intersections, termination = trace(state_arr, 0.5, 0.5, 1.0, 0.0)

    assert termination == TRACE_VACUUM
    assert len(intersections) == 2
    assert intersections[0]["cell_ID"] == 0
    assert intersections[0]["distance"] == pytest.approx(0.5)
    assert not intersections[0]["vacuum_exit"]
    assert intersections[1]["cell_ID"] == 1
    assert intersections[1]["distance"] == pytest.approx(1.0)
    assert intersections[1]["vacuum_exit"]


def test_vacuum_exit_through_corner():
    state_arr = make_state("vacuum")
    u = math.sqrt(0.5)
    _, intersections, termination = trace(state_arr, 0.5, 0.5, u, u)

    assert termination == TRACE_VACUUM
    assert list(intersections["cell_ID"]) == [0, 3]
    assert intersections["distance"] == pytest.approx([math.sqrt(0.5), math.sqrt(2.0)])


def test_reflective_bounce():
    state_arr = make_state("reflective", distance_per_ray=3.0)
    ray_container, intersections, termination = trace(state_arr, 0.5, 0.5, 1.0, 0.0)

    assert termination == TRACE_BUDGET
    assert list(intersections["cell_ID"]) == [0, 1, 1, 0]
    assert intersections["distance"] == pytest.approx([0.5, 1.0, 1.0, 0.5])

    ray = ray_container[0]
    assert ray["ux"] == -1.0
    assert ray["x"] == pytest.approx(0.5)


def test_budget_ends_inside_cell():
    state_arr = make_state("vacuum", distance_per_ray=0.25)
    _, intersections, termination = trace(state_arr, 0.5, 0.5, 1.0, 0.0)

    assert termination == TRACE_BUDGET
    assert len(intersections) == 1
    assert intersections[0]["distance"] == pytest.approx(0.25)
    assert not intersections[0]["vacuum_exit"]


def test_truncation():
    state_arr = make_state("reflective", distance_per_ray=100.0, max_intersections=3)
    ray_container, intersections, termination = trace(state_arr, 0.5, 0.5, 1.0, 0.0)

    assert termination == TRACE_TRUNCATED
    assert len(intersections) == 3
    assert ray_container[0]["distance"] < 100.0


def test_default_cap_short_diagonal_ray():
    # Four grid lines crossed within 1.5 cm along the diagonal
    state_arr = make_state("reflective", N=4, length=4.0, distance_per_ray=1.5)
    u = 1.0 / math.sqrt(2.0)
    _, intersections, termination = trace(state_arr, 0.99, 0.98, u, u)

    assert state_arr[0]["settings"]["max_intersections_per_ray"] == 6
    assert termination == TRACE_BUDGET
    assert list(intersections["cell_ID"]) == [0, 1, 5, 6, 10]
    assert np.sum(intersections["distance"]) == pytest.approx(1.5)


def test_axis_aligned_vertical():
    state_arr = make_state("reflective", distance_per_ray=5.0)
    _, intersections, termination = trace(state_arr, 0.5, 0.5, 0.0, 1.0)

    assert termination == TRACE_BUDGET
    assert np.all(np.isfinite(intersections["distance"]))
    assert set(intersections["cell_ID"]) == {0, 2}
    assert np.sum(intersections["distance"]) == pytest.approx(5.0)


def test_sampled_rays_reflective():
    state_arr = make_state("reflective", N=5, length=5.0, distance_per_ray=20.0)
    settings = state_arr[0]["settings"]
    ray_container = np.zeros(1, type_.ray)
    intersections = np.zeros(settings["max_intersections_per_ray"], type_.intersection)

    for idx_ray in range(50):
        sample_ray(ray_container, idx_ray, np.uint64(11), settings)
        N, termination = trace_ray(ray_container, intersections, settings)
        segments = intersections[:N]
        ray = ray_container[0]

        assert termination == TRACE_BUDGET
        assert np.sum(segments["distance"]) == pytest.approx(20.0)
        assert np.all(segments["distance"] >= 0.0)
        assert np.all((segments["cell_ID"] >= 0) & (segments["cell_ID"] < 25))
        assert ray["ux"] ** 2 + ray["uy"] ** 2 == pytest.approx(1.0)
        assert 0.0 <= ray["x"] <= 5.0
        assert 0.0 <= ray["y"] <= 5.0


def test_sampled_rays_vacuum():
    state_arr = make_state("vacuum", N=4, length=4.0, distance_per_ray=50.0)
    settings = state_arr[0]["settings"]
    ray_container = np.zeros(1, type_.ray)
    intersections = np.zeros(settings["max_intersections_per_ray"], type_.intersection)

    for idx_ray in range(50):
        sample_ray(ray_container, idx_ray, np.uint64(5), settings)
        N, termination = trace_ray(ray_container, intersections, settings)

        # The domain is much shorter than the ray
        assert termination == TRACE_VACUUM
        assert intersections[N - 1]["vacuum_exit"]
        assert not np.any(intersections[: N - 1]["vacuum_exit"])
        assert np.sum(intersections[:N]["distance"]) < 50.0


def test_vacuum_exit_right_edge_reflective_elsewhere():
    lattice = Lattice(
        [MaterialMG(total=[1.0])],
        np.zeros((2, 2), dtype=int),
        2.0,
        x_minus="reflective",
        x_plus="vacuum",
        y_minus="reflective",
        y_plus="reflective",
    )
    settings = Settings(N_ray=1, distance_per_ray=10.0)
    settings.set_eigenmode(N_inactive=0, N_active=1)
    state_arr, _, _, _ = preparation(Simulation(lattice, settings))

    _, intersections, termination = trace(state_arr, 0.5, 0.5, 1.0, 0.0)

    assert termination == TRACE_VACUUM
    assert list(intersections["cell_ID"]) == [0, 1]
    assert intersections["distance"] == pytest.approx([0.5, 1.0])
    assert list(intersections["vacuum_exit"]) == [False, True]
