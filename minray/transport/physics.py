import math

from numba import njit

####

from minray.constant import FOUR_PI, INV_4PI

# ======================================================================================
# Flux attenuation
# ======================================================================================


@njit
def attenuate_flux(intersections, N_intersection, angular_flux, xs, flux, settings):
    """
    Attenuate the ray's angular flux along its segments and tally the scalar flux

    The first `distance_inactive` of the ray is a dead zone: the angular flux is
    attenuated there but nothing is tallied. A segment straddling the end of the
    dead zone is split.
    """
    distance_inactive = settings["distance_inactive"]
    travelled = 0.0

    for i in range(N_intersection):
        intersection = intersections[i]
        cell = intersection["cell_ID"]
        distance = intersection["distance"]

        if travelled + distance <= distance_inactive:
            attenuate_segment(cell, distance, False, angular_flux, xs, flux)
        elif travelled >= distance_inactive:
            attenuate_segment(cell, distance, True, angular_flux, xs, flux)
        else:
            distance_dead = distance_inactive - travelled
            attenuate_segment(cell, distance_dead, False, angular_flux, xs, flux)
            attenuate_segment(
                cell, distance - distance_dead, True, angular_flux, xs, flux
            )

        travelled += distance


@njit
def attenuate_segment(cell, distance, tally, angular_flux, xs, flux):
    """
    Exact attenuation across a flat-source segment

        psi_out = psi_in - (psi_in - Q) * (1 - exp(-tau))

    The decrement, scaled to scalar flux, is the segment's track-length tally.
    """
    material_ID = xs.material_ID[cell]
    G = angular_flux.shape[0]

    for g in range(G):
        tau = xs.total[material_ID, g] * distance
        delta_psi = (angular_flux[g] - flux.isotropic_source[cell, g]) * (
            -math.expm1(-tau)
        )
        if tally:
            flux.new_scalar_flux[cell, g] += FOUR_PI * delta_psi
        angular_flux[g] -= delta_psi


# ======================================================================================
# Isotropic source
# ======================================================================================


@njit
def update_isotropic_sources(state, xs, flux):
    inverse_k = 1.0 / state["k_eff"]
    N_cell = state["settings"]["N_cell"]
    for cell in range(N_cell):
        update_cell_source(cell, inverse_k, xs, flux)


@njit
def update_cell_source(cell, inverse_k, xs, flux):
    """
    Scattering plus fission emission of the cell, from the previous scalar flux

    The emission density S is stored in angular-flux units, Q = S / (4 pi Sigma_t),
    the value the angular flux relaxes to along a segment.
    """
    material_ID = xs.material_ID[cell]
    G = flux.scalar_flux.shape[1]

    # Fission neutron production, shared by all outgoing groups
    fission = 0.0
    for g_in in range(G):
        fission += xs.nu_fission[material_ID, g_in] * flux.scalar_flux[cell, g_in]

    for g in range(G):
        scatter = 0.0
        for g_in in range(G):
            scatter += xs.scatter[material_ID, g_in, g] * flux.scalar_flux[cell, g_in]
        emission = scatter + xs.chi[material_ID, g] * fission * inverse_k

        total = xs.total[material_ID, g]
        source = 0.0
        if total != 0.0:
            source = emission * INV_4PI / total
        if not math.isfinite(source):
            source = 0.0
        flux.isotropic_source[cell, g] = source
