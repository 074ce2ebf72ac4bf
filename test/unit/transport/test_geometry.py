import numpy as np
import pytest

####

import minray.object_.numba_types as type_

from minray.constant import BC_NONE, BC_REFLECTIVE, BC_VACUUM
from minray.main import preparation
from minray.object_.lattice import Lattice
from minray.object_.material import MaterialMG
from minray.object_.settings import Settings
from minray.object_.simulation import Simulation
from minray.transport.geometry import (
    cross_boundary,
    get_boundary_condition,
    get_cell_bounds,
    get_cell_ID,
    get_cell_indices,
    locate,
)
from minray.transport.ray import set_ray


def make_state(x_minus, x_plus, y_minus, y_plus, N=2, length=2.0):
    lattice = Lattice(
        [MaterialMG(total=[1.0])],
        np.zeros((N, N), dtype=int),
        length,
        x_minus,
        x_plus,
        y_minus,
        y_plus,
    )
    settings = Settings(N_ray=1)
    settings.set_eigenmode(N_inactive=0, N_active=1)
    state_arr, _, _, _ = preparation(Simulation(lattice, settings))
    return state_arr


@pytest.fixture
def state_arr():
    return make_state("vacuum", "reflective", "vacuum", "vacuum")


@pytest.fixture
def settings(state_arr):
    return state_arr[0]["settings"]


def test_cell_ID_row_major(settings):
    assert get_cell_ID(0, 0, settings) == 0
    assert get_cell_ID(1, 0, settings) == 1
    assert get_cell_ID(0, 1, settings) == 2
    assert get_cell_ID(1, 1, settings) == 3


def test_cell_indices_inverse(settings):
    for cell_ID in range(4):
        ix, iy = get_cell_indices(cell_ID, settings)
        assert get_cell_ID(ix, iy, settings) == cell_ID


def test_cell_bounds(settings):
    assert get_cell_bounds(3, settings) == pytest.approx((1.0, 2.0, 1.0, 2.0))
    assert get_cell_bounds(1, settings) == pytest.approx((1.0, 2.0, 0.0, 1.0))


def test_locate_clamped(settings):
    assert locate(0.5, 1.5, settings) == (0, 1)
    assert locate(2.0, -0.1, settings) == (1, 0)


def test_boundary_condition_internal(settings):
    assert get_boundary_condition(0, 1, settings) == BC_NONE
    assert get_boundary_condition(1, 1, settings) == BC_NONE


def test_boundary_condition_edges(settings):
    assert get_boundary_condition(-1, 0, settings) == BC_VACUUM
    assert get_boundary_condition(2, 0, settings) == BC_REFLECTIVE
    assert get_boundary_condition(0, -1, settings) == BC_VACUUM
    assert get_boundary_condition(0, 2, settings) == BC_VACUUM


def test_boundary_condition_corner_vacuum_wins(settings):
    assert get_boundary_condition(2, 2, settings) == BC_VACUUM
    assert get_boundary_condition(2, -1, settings) == BC_VACUUM


def test_boundary_condition_corner_both_reflective():
    settings = make_state("reflective", "reflective", "reflective", "reflective")[0][
        "settings"
    ]
    assert get_boundary_condition(-1, -1, settings) == BC_REFLECTIVE


def test_cross_internal_edge(settings):
    ray_container = np.zeros(1, type_.ray)
    set_ray(ray_container, 0.5, 0.5, 1.0, 0.0, settings)
    ray_container[0]["x"] = 1.0 - 1e-15

    assert not cross_boundary(ray_container, True, False, settings)
    ray = ray_container[0]
    assert ray["ix"] == 1
    assert ray["cell_ID"] == 1
    assert ray["x"] == 1.0


def test_cross_reflective_edge(settings):
    ray_container = np.zeros(1, type_.ray)
    set_ray(ray_container, 1.5, 0.5, 0.6, 0.8, settings)
    ray_container[0]["x"] = 2.0

    assert not cross_boundary(ray_container, True, False, settings)
    ray = ray_container[0]
    assert ray["ix"] == 1
    assert ray["ux"] == pytest.approx(-0.6)
    assert ray["uy"] == pytest.approx(0.8)
    assert ray["ux"] ** 2 + ray["uy"] ** 2 == pytest.approx(1.0)


def test_cross_vacuum_edge(settings):
    ray_container = np.zeros(1, type_.ray)
    set_ray(ray_container, 0.5, 0.5, -1.0, 0.0, settings)
    ray_container[0]["x"] = 0.0

    assert cross_boundary(ray_container, True, False, settings)


def test_cross_corner_reflective_and_vacuum(settings):
    ray_container = np.zeros(1, type_.ray)
    u = np.sqrt(0.5)
    set_ray(ray_container, 1.5, 1.5, u, u, settings)

    assert cross_boundary(ray_container, True, True, settings)
