import math
import numpy as np

from mpi4py import MPI
from numba import njit

####

from minray.constant import FOUR_PI

# ======================================================================================
# Reduce sweep tallies
# ======================================================================================


def reduce_tally(state, flux):
    """
    Sum the per-rank partial tallies and sweep counters

    Every rank traces its own share of rays into its private `new_scalar_flux`; the
    Allreduce is the barrier between the sweep and the normalization.
    """
    MPI.COMM_WORLD.Allreduce(MPI.IN_PLACE, flux.new_scalar_flux, MPI.SUM)

    counters = np.array([state["N_intersection"], state["N_missed_ray"]], np.int64)
    buff = np.zeros(2, np.int64)
    MPI.COMM_WORLD.Allreduce(counters, buff, MPI.SUM)
    state["N_intersection"] = buff[0]
    state["N_missed_ray"] = buff[1]
    state["N_intersection_total"] += buff[0]
    state["N_missed_ray_total"] += buff[1]


# ======================================================================================
# Normalize scalar flux
# ======================================================================================


@njit
def normalize_scalar_flux(state, xs, flux):
    settings = state["settings"]
    active = state["iteration_active"]
    track_length = settings["cell_expected_track_length"]

    for cell in range(settings["N_cell"]):
        material_ID = xs.material_ID[cell]
        for g in range(flux.new_scalar_flux.shape[1]):
            denominator = xs.total[material_ID, g] * track_length
            value = normalize_value(
                flux.new_scalar_flux[cell, g],
                denominator,
                flux.isotropic_source[cell, g],
            )
            flux.new_scalar_flux[cell, g] = value

            # Running sums over active iterations
            if active and value > 0.0:
                flux.scalar_flux_accumulator[cell, g] += value
                flux.scalar_flux_square_accumulator[cell, g] += value * value


@njit
def normalize_value(tally, denominator, isotropic_source):
    """
    Scalar flux from the raw track-length tally and the isotropic source

    A non-finite tally ratio (vanishing Sigma_t or track length) is reset to zero.
    """
    value = math.inf
    if denominator != 0.0:
        value = tally / denominator
    if not math.isfinite(value):
        value = 0.0
    return value + FOUR_PI * isotropic_source


# ======================================================================================
# Eigenvalue
# ======================================================================================


@njit
def compute_fission_source(scalar_flux, xs, settings):
    total = 0.0
    for cell in range(settings["N_cell"]):
        material_ID = xs.material_ID[cell]
        for g in range(scalar_flux.shape[1]):
            total += xs.nu_fission[material_ID, g] * scalar_flux[cell, g]
    return total * settings["cell_volume"]


@njit
def update_k_eff(state, xs, flux):
    """
    Power iteration eigenvalue update: k_new = k_old * F_new / F_old

    F_old is the fission source of the flux the current iteration's source was built
    from. Without fission, k keeps its value.
    """
    fission_source = compute_fission_source(flux.new_scalar_flux, xs, state["settings"])
    if state["fission_source"] > 0.0:
        state["k_eff"] = state["k_eff"] * fission_source / state["fission_source"]
    state["fission_source"] = fission_source


@njit
def eigenvalue_iteration(state):
    """Fold the iteration's k into the running mean and standard deviation"""
    if not state["iteration_active"]:
        return

    k_eff = state["k_eff"]
    state["k_avg"] += k_eff
    state["k_sdv"] += k_eff * k_eff

    N = 1 + state["idx_iteration"] - state["settings"]["N_inactive"]
    mean, sdev = compute_statistics(state["k_avg"], state["k_sdv"], N)
    state["k_avg_running"] = mean
    state["k_sdv_running"] = sdev


@njit
def compute_statistics(total, total_square, N):
    """Mean and standard deviation of the mean from running sums of N samples"""
    if N < 1:
        return 0.0, 0.0
    mean = total / N
    if N == 1:
        return mean, 0.0
    radicand = (total_square / N - mean * mean) / (N - 1)

    # Round-off may leave a negative radicand
    if radicand <= 0.0:
        return mean, 0.0
    return mean, math.sqrt(radicand)


@njit
def advance_scalar_flux(flux):
    """The normalized flux becomes the previous iterate; the tally is cleared"""
    flux.scalar_flux[:, :] = flux.new_scalar_flux
    flux.new_scalar_flux[:, :] = 0.0


# ======================================================================================
# Finalize
# ======================================================================================


def finalize(state, flux):
    """
    Mean and standard deviation of the scalar flux over active iterations

    The accumulators are left untouched.
    """
    N = state["settings"]["N_active"]
    shape = flux.scalar_flux_accumulator.shape
    if N < 1:
        return np.zeros(shape), np.zeros(shape)

    mean = flux.scalar_flux_accumulator / N
    if N == 1:
        return mean, np.zeros(shape)

    radicand = (flux.scalar_flux_square_accumulator / N - np.square(mean)) / (N - 1)
    sdev = np.sqrt(np.maximum(radicand, 0.0))
    return mean, sdev
