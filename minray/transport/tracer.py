from numba import njit

####

import minray.transport.geometry as geometry
import minray.transport.ray as ray_module

from minray.constant import (
    COINCIDENCE_TOLERANCE,
    EPSILON_DIRECTION,
    INF,
    TRACE_BUDGET,
    TRACE_TRUNCATED,
    TRACE_VACUUM,
)


@njit
def trace_ray(ray_container, intersections, settings):
    """
    Trace the ray through the lattice, recording its segments

    Each record holds the cell traversed, the segment length, and whether the
    segment ended by leaving through a vacuum edge. Tracing stops when the travel
    budget is spent, at a vacuum exit, or when the intersection buffer is full.

    Returns
    -------
    N_intersection : int
        Number of records written into `intersections`
    termination : int
        TRACE_BUDGET, TRACE_VACUUM, or TRACE_TRUNCATED
    """
    ray = ray_container[0]
    max_intersection = settings["max_intersections_per_ray"]
    distance_per_ray = settings["distance_per_ray"]
    width = settings["cell_width"]
    tolerance = COINCIDENCE_TOLERANCE * width

    N_intersection = 0
    termination = TRACE_TRUNCATED
    while N_intersection < max_intersection:
        distance_remaining = distance_per_ray - ray["distance"]

        # Distance to the nearest x and y grid lines of the current cell
        d_x = grid_distance(ray["x"], ray["ux"], ray["ix"], width)
        d_y = grid_distance(ray["y"], ray["uy"], ray["iy"], width)
        distance = min(d_x, d_y)

        intersection = intersections[N_intersection]
        intersection["cell_ID"] = ray["cell_ID"]
        intersection["vacuum_exit"] = False
        N_intersection += 1

        # Budget spent before the next crossing
        if distance >= distance_remaining:
            intersection["distance"] = distance_remaining
            ray_module.move(ray_container, distance_remaining)
            termination = TRACE_BUDGET
            break

        intersection["distance"] = distance
        ray_module.move(ray_container, distance)

        # Both grid lines are crossed at a corner
        cross_x = d_x <= d_y + tolerance
        cross_y = d_y <= d_x + tolerance
        if geometry.cross_boundary(ray_container, cross_x, cross_y, settings):
            intersection["vacuum_exit"] = True
            termination = TRACE_VACUUM
            break

    return N_intersection, termination


@njit
def grid_distance(value, direction, index, width):
    """
    Distance along the direction to the next grid line of cell `index`

    A direction component within EPSILON_DIRECTION of zero never reaches a grid line.
    """
    if direction > EPSILON_DIRECTION:
        distance = ((index + 1) * width - value) / direction
    elif direction < -EPSILON_DIRECTION:
        distance = (index * width - value) / direction
    else:
        return INF
    return max(distance, 0.0)
