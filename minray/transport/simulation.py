import numpy as np

from mpi4py import MPI
from numba import njit

####

import minray.object_.numba_types as type_
import minray.transport.mpi as mpi
import minray.transport.physics as physics
import minray.transport.ray as ray_module
import minray.transport.rng as rng
import minray.transport.tally as tally_module
import minray.transport.tracer as tracer

from minray.constant import TRACE_TRUNCATED
from minray.print_ import print_eigenvalue_header, print_progress_eigenvalue


# ======================================================================================
# Eigenvalue simulation
# ======================================================================================


def eigenvalue_simulation(state_arr, xs, flux, history, use_progress_bar=True):
    """
    Power iteration over N_inactive + N_active iterations

    Each iteration: source update, transport sweep, tally reduction, flux
    normalization, k-eff update, and (active iterations) statistics. Iteration n+1
    only sees the k-eff and scalar flux left by iteration n.
    """
    state = state_arr[0]

    # Get some settings
    settings = state["settings"]
    N_inactive = settings["N_inactive"]
    N_iteration = settings["N_iteration"]
    N_ray = settings["N_ray"]

    # Distribute work
    mpi.distribute_work(N_ray, state)

    if use_progress_bar:
        print_eigenvalue_header()

    # Loop over power iterations
    for idx_iteration in range(N_iteration):
        state["idx_iteration"] = idx_iteration
        state["iteration_active"] = idx_iteration >= N_inactive
        seed_iteration = np.uint64(
            rng.iteration_seed(idx_iteration, settings["rng_seed"])
        )

        # Source from the previous flux and k-eff
        physics.update_isotropic_sources(state, xs, flux)

        # Transport sweep over this rank's rays, then sum over ranks
        time_start = MPI.Wtime()
        transport_sweep(seed_iteration, state, xs, flux)
        tally_module.closeout.reduce_tally(state, flux)
        state["runtime_transport_sweep"] += MPI.Wtime() - time_start

        # Normalize and update the eigenvalue
        tally_module.closeout.normalize_scalar_flux(state, xs, flux)
        tally_module.closeout.update_k_eff(state, xs, flux)
        tally_module.closeout.eigenvalue_iteration(state)

        # Iteration history
        history.k_cycle[idx_iteration] = state["k_eff"]
        history.missed_ray_fraction[idx_iteration] = state["N_missed_ray"] / N_ray
        history.N_intersection[idx_iteration] = state["N_intersection"]

        if use_progress_bar:
            print_progress_eigenvalue(state)

        tally_module.closeout.advance_scalar_flux(flux)


# ======================================================================================
# Transport sweep
# ======================================================================================


@njit
def transport_sweep(seed, state, xs, flux):
    """
    Sample, trace, and attenuate every ray assigned to this rank

    Rays are independent; the only shared write is the `new_scalar_flux` tally.
    """
    settings = state["settings"]
    work_start = state["mpi_work_start"]
    work_size = state["mpi_work_size"]

    ray_container = np.zeros(1, type_.ray)
    intersections = np.zeros(settings["max_intersections_per_ray"], type_.intersection)
    angular_flux = np.zeros(settings["G"])

    N_intersection = 0
    N_missed_ray = 0
    for idx_work in range(work_size):
        ray_module.sample_ray(ray_container, work_start + idx_work, seed, settings)
        N, termination = tracer.trace_ray(ray_container, intersections, settings)

        # Rays start with no angular flux
        angular_flux[:] = 0.0
        physics.attenuate_flux(intersections, N, angular_flux, xs, flux, settings)

        N_intersection += N
        if termination == TRACE_TRUNCATED:
            N_missed_ray += 1

    state["N_intersection"] = N_intersection
    state["N_missed_ray"] = N_missed_ray
