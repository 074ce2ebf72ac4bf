from minray.object_.base import ObjectBase
from minray.object_.lattice import Lattice
from minray.object_.settings import Settings

# ======================================================================================
# Simulation
# ======================================================================================


class Simulation(ObjectBase):
    """
    A random ray eigenvalue problem: the lattice to solve and how to solve it
    """

    # Annotations for Numba mode
    label: str = "simulation"
    #
    lattice: Lattice
    settings: Settings

    def __init__(self, lattice, settings=None):
        if settings is None:
            settings = Settings()
        self.lattice = lattice
        self.settings = settings

    def __repr__(self):
        text = "\n"
        text += "Simulation\n"
        text += f"  - Lattice: {self.lattice.N} x {self.lattice.N}, {len(self.lattice.materials)} materials\n"
        text += f"  - Rays per iteration: {self.settings.N_ray}\n"
        text += f"  - Iterations: {self.settings.N_inactive} inactive, {self.settings.N_active} active\n"
        return text
