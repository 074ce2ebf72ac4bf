import numpy as np

from collections import namedtuple

from minray.print_ import print_error

# ======================================================================================
# Basic types
# ======================================================================================

float64 = np.float64
int64 = np.int64
uint64 = np.uint64
bool_ = np.bool_


# ======================================================================================
# Alignment
# ======================================================================================
# Fields are padded so that every primitive member is aligned by its size; records
# nested in other records (settings in the simulation state) then keep a C-like
# standard layout for both NumPy and Numba.


def align(field_list):
    result = []
    offset = 0
    pad_id = 0
    for field in field_list:
        if len(field) > 3:
            print_error(f"Unexpected struct field specification: {field}")
        multiplier = 1
        if len(field) == 3:
            field = (field[0], field[1], tuple([max(d, 1) for d in field[2]]))
            for d in field[2]:
                multiplier *= d
        kind = np.dtype(field[1])
        size = kind.itemsize
        alignment = 8 if kind.isbuiltin == 0 else size
        size *= multiplier

        if offset % alignment != 0:
            pad_size = alignment - (offset % alignment)
            result.append((f"padding_{pad_id}", np.uint8, (pad_size,)))
            pad_id += 1
            offset += pad_size

        result.append(field)
        offset += size

    if offset % 8 != 0:
        pad_size = 8 - (offset % 8)
        result.append((f"padding_{pad_id}", np.uint8, (pad_size,)))

    return result


def into_dtype(field_list):
    return np.dtype(align(field_list), align=True)


# ======================================================================================
# Settings
# ======================================================================================

settings = into_dtype(
    [
        # Lattice
        ("N_cell_per_dimension", int64),
        ("N_cell", int64),
        ("N_material", int64),
        ("length_per_dimension", float64),
        ("cell_width", float64),
        ("inverse_cell_width", float64),
        ("cell_volume", float64),
        ("bc_x_minus", int64),
        ("bc_x_plus", int64),
        ("bc_y_minus", int64),
        ("bc_y_plus", int64),
        # Energy
        ("G", int64),
        # Rays
        ("N_ray", int64),
        ("distance_per_ray", float64),
        ("distance_inactive", float64),
        ("max_intersections_per_ray", int64),
        ("cell_expected_track_length", float64),
        ("inverse_total_track_length", float64),
        ("rng_seed", uint64),
        # Power iteration
        ("N_inactive", int64),
        ("N_active", int64),
        ("N_iteration", int64),
        ("k_init", float64),
    ]
)


# ======================================================================================
# Simulation state
# ======================================================================================

state = into_dtype(
    [
        ("settings", settings),
        # Power iteration
        ("idx_iteration", int64),
        ("iteration_active", bool_),
        ("k_eff", float64),
        ("fission_source", float64),
        ("k_avg", float64),
        ("k_sdv", float64),
        ("k_avg_running", float64),
        ("k_sdv_running", float64),
        # Sweep counters
        ("N_intersection", int64),
        ("N_missed_ray", int64),
        ("N_intersection_total", int64),
        ("N_missed_ray_total", int64),
        # MPI
        ("mpi_size", int64),
        ("mpi_rank", int64),
        ("mpi_master", bool_),
        ("mpi_work_start", int64),
        ("mpi_work_size", int64),
        ("mpi_work_size_total", int64),
        # Runtimes
        ("runtime_total", float64),
        ("runtime_preparation", float64),
        ("runtime_simulation", float64),
        ("runtime_transport_sweep", float64),
        ("runtime_output", float64),
    ]
)


# ======================================================================================
# Ray and intersection record
# ======================================================================================

ray = into_dtype(
    [
        ("x", float64),
        ("y", float64),
        ("ux", float64),
        ("uy", float64),
        ("ix", int64),
        ("iy", int64),
        ("cell_ID", int64),
        ("distance", float64),
        ("rng_seed", uint64),
    ]
)

intersection = into_dtype(
    [
        ("cell_ID", int64),
        ("distance", float64),
        ("vacuum_exit", bool_),
    ]
)


# ======================================================================================
# Array containers
# ======================================================================================

# Read-only material data, indexed [material, group] and [material, group, group]
CrossSectionData = namedtuple(
    "CrossSectionData",
    ["material_ID", "total", "fission", "nu_fission", "chi", "scatter"],
)

# Mutable cell flux state, indexed [cell, group]
FluxData = namedtuple(
    "FluxData",
    [
        "scalar_flux",
        "new_scalar_flux",
        "isotropic_source",
        "scalar_flux_accumulator",
        "scalar_flux_square_accumulator",
    ],
)


def make_flux_data(N_cell, G):
    return FluxData(
        scalar_flux=np.ones((N_cell, G)),
        new_scalar_flux=np.zeros((N_cell, G)),
        isotropic_source=np.zeros((N_cell, G)),
        scalar_flux_accumulator=np.zeros((N_cell, G)),
        scalar_flux_square_accumulator=np.zeros((N_cell, G)),
    )


# Per-iteration history, filled by the driver
IterationHistory = namedtuple(
    "IterationHistory", ["k_cycle", "missed_ray_fraction", "N_intersection"]
)


def make_iteration_history(N_iteration):
    return IterationHistory(
        k_cycle=np.zeros(N_iteration),
        missed_ray_fraction=np.zeros(N_iteration),
        N_intersection=np.zeros(N_iteration, np.int64),
    )
