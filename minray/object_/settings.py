import math

from dataclasses import dataclass

####

from minray.object_.base import ObjectBase
from minray.print_ import print_error

# ======================================================================================
# Settings
# ======================================================================================


@dataclass
class Settings(ObjectBase):
    # Annotations for Numba mode
    label: str = "settings"

    # Rays
    N_ray: int = 0
    distance_per_ray: float = 10.0
    distance_inactive: float = 0.0
    max_intersections_per_ray: int = 0
    rng_seed: int = 1

    # k-eigenvalue
    N_inactive: int = 0
    N_active: int = 0
    N_iteration: int = 0
    k_init: float = 1.0

    # Output
    output_name: str = "output"
    use_progress_bar: bool = True
    save_plot: bool = False

    def set_eigenmode(self, N_inactive=0, N_active=0, k_init=1.0):
        """
        Set the power iteration

        Parameters
        ----------
        N_inactive : int
            Burn-in iterations; their flux estimates are not accumulated
        N_active : int
            Iterations accumulated into the flux and k-eff statistics
        k_init : float
            Initial k-eff guess
        """
        if N_inactive < 0 or N_active < 0:
            print_error("Eigenmode: iteration counts must be non-negative.")
        if N_inactive + N_active == 0:
            print_error("Eigenmode: at least one iteration is needed.")
        if k_init <= 0.0:
            print_error("Eigenmode: initial k-eff must be positive.")

        self.N_inactive = N_inactive
        self.N_active = N_active
        self.N_iteration = self.N_inactive + self.N_active
        self.k_init = k_init

    def set_dead_zone(self, distance_inactive):
        """Travel distance at the start of each ray over which nothing is tallied"""
        if distance_inactive < 0.0 or distance_inactive >= self.distance_per_ray:
            print_error(
                "Dead zone: distance must be non-negative and shorter than the ray."
            )
        self.distance_inactive = distance_inactive

    def check(self):
        if self.N_ray <= 0:
            print_error("Settings: N_ray must be positive.")
        if self.distance_per_ray <= 0.0:
            print_error("Settings: distance_per_ray must be positive.")
        if self.distance_inactive < 0.0 or self.distance_inactive >= self.distance_per_ray:
            print_error("Settings: distance_inactive must be in [0, distance_per_ray).")
        if self.N_iteration <= 0:
            print_error("Settings: call set_eigenmode to set the power iteration.")
        if self.max_intersections_per_ray < 0:
            print_error("Settings: max_intersections_per_ray must be non-negative.")


def default_max_intersections(distance_per_ray, cell_width):
    """
    Intersection cap for rays of the given length

    A ray crosses at most |ux| d / w + 1 vertical and |uy| d / w + 1 horizontal grid
    lines, reflections included, and |ux| + |uy| <= sqrt(2); one more for the last
    segment.
    """
    return int(math.ceil(math.sqrt(2.0) * distance_per_ray / cell_width)) + 3
