import math

from numba import njit

####

from minray.constant import BC_NONE, BC_REFLECTIVE, BC_VACUUM

# ======================================================================================
# Cell indexing
# ======================================================================================
#   Cells are numbered row by row: cell_ID = iy * N + ix


@njit
def get_cell_ID(ix, iy, settings):
    return iy * settings["N_cell_per_dimension"] + ix


@njit
def get_cell_indices(cell_ID, settings):
    N = settings["N_cell_per_dimension"]
    return cell_ID % N, cell_ID // N


@njit
def get_cell_bounds(cell_ID, settings):
    """
    Return (x_min, x_max, y_min, y_max) of the cell
    """
    ix, iy = get_cell_indices(cell_ID, settings)
    width = settings["cell_width"]
    return ix * width, (ix + 1) * width, iy * width, (iy + 1) * width


@njit
def locate(x, y, settings):
    """
    Get the cell indices containing the point, clamped to the lattice
    """
    N = settings["N_cell_per_dimension"]
    inverse_width = settings["inverse_cell_width"]

    ix = int(math.floor(x * inverse_width))
    iy = int(math.floor(y * inverse_width))
    ix = min(max(ix, 0), N - 1)
    iy = min(max(iy, 0), N - 1)
    return ix, iy


# ======================================================================================
# Boundary conditions
# ======================================================================================


@njit
def get_boundary_condition(ix, iy, settings):
    """
    Boundary condition met when moving into cell indices (ix, iy)

    Indices inside the lattice give BC_NONE (internal crossing). Indices beyond a
    corner combine both edges: vacuum wins over reflective.
    """
    N = settings["N_cell_per_dimension"]

    bc_x = BC_NONE
    if ix < 0:
        bc_x = settings["bc_x_minus"]
    elif ix >= N:
        bc_x = settings["bc_x_plus"]

    bc_y = BC_NONE
    if iy < 0:
        bc_y = settings["bc_y_minus"]
    elif iy >= N:
        bc_y = settings["bc_y_plus"]

    if bc_x == BC_VACUUM or bc_y == BC_VACUUM:
        return BC_VACUUM
    if bc_x == BC_REFLECTIVE or bc_y == BC_REFLECTIVE:
        return BC_REFLECTIVE
    return BC_NONE


@njit
def reflect(ray_container, axis_x):
    """
    Mirror the direction component normal to the crossed edge
    """
    ray = ray_container[0]
    if axis_x:
        ray["ux"] = -ray["ux"]
    else:
        ray["uy"] = -ray["uy"]


@njit
def cross_boundary(ray_container, cross_x, cross_y, settings):
    """
    Move the ray across the x and/or y edge of its current cell

    The ray position is expected to be on the crossed edge(s); it is snapped onto the
    grid line to keep round-off from accumulating. Returns True if the ray leaves
    through a vacuum edge.
    """
    ray = ray_container[0]
    width = settings["cell_width"]
    terminate = False

    if cross_x:
        step = 1 if ray["ux"] > 0.0 else -1
        ix_next = ray["ix"] + step
        bc = get_boundary_condition(ix_next, ray["iy"], settings)

        # Snap onto the grid line
        if step > 0:
            ray["x"] = (ray["ix"] + 1) * width
        else:
            ray["x"] = ray["ix"] * width

        if bc == BC_NONE:
            ray["ix"] = ix_next
        elif bc == BC_REFLECTIVE:
            reflect(ray_container, True)
        else:
            terminate = True

    if cross_y:
        step = 1 if ray["uy"] > 0.0 else -1
        iy_next = ray["iy"] + step
        bc = get_boundary_condition(ray["ix"], iy_next, settings)

        # Snap onto the grid line
        if step > 0:
            ray["y"] = (ray["iy"] + 1) * width
        else:
            ray["y"] = ray["iy"] * width

        if bc == BC_NONE:
            ray["iy"] = iy_next
        elif bc == BC_REFLECTIVE:
            reflect(ray_container, False)
        else:
            terminate = True

    ray["cell_ID"] = get_cell_ID(ray["ix"], ray["iy"], settings)
    return terminate
