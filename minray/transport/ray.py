import math

from numba import njit, uint64

####

import minray.transport.geometry as geometry
import minray.transport.rng as rng

from minray.constant import PI


@njit
def sample_ray(ray_container, idx_ray, seed, settings):
    """
    Sample the starting position and direction of ray idx_ray

    Position is uniform over the lattice and direction is uniform over the unit
    circle. The ray's random stream is keyed on (seed, idx_ray) only.
    """
    ray = ray_container[0]
    ray["rng_seed"] = rng.split_seed(uint64(idx_ray), seed)

    length = settings["length_per_dimension"]
    x = length * rng.lcg(ray_container)
    y = length * rng.lcg(ray_container)
    azi = 2.0 * PI * rng.lcg(ray_container)

    set_ray(ray_container, x, y, math.cos(azi), math.sin(azi), settings)


@njit
def set_ray(ray_container, x, y, ux, uy, settings):
    """Place the ray at (x, y) moving along (ux, uy), with a fresh travel budget"""
    ray = ray_container[0]
    ix, iy = geometry.locate(x, y, settings)

    ray["x"] = x
    ray["y"] = y
    ray["ux"] = ux
    ray["uy"] = uy
    ray["ix"] = ix
    ray["iy"] = iy
    ray["cell_ID"] = geometry.get_cell_ID(ix, iy, settings)
    ray["distance"] = 0.0


@njit
def move(ray_container, distance):
    ray = ray_container[0]
    ray["x"] += ray["ux"] * distance
    ray["y"] += ray["uy"] * distance
    ray["distance"] += distance
