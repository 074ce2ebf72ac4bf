import numpy as np
import minray

# =============================================================================
# Set model
# =============================================================================

# Two-group fuel with downscatter only
fuel = minray.MaterialMG(
    total=[0.30, 1.00],
    scatter=[[0.24, 0.04], [0.00, 0.90]],
    fission=[0.004, 0.04],
    nu_fission=[0.010, 0.10],
    chi=[1.0, 0.0],
    name="fuel",
)

# All-reflective lattice: an infinite medium
lattice = minray.Lattice(
    materials=[fuel],
    material_map=np.zeros((10, 10), dtype=int),
    length=10.0,
)

# =============================================================================
# Set settings and run MinRay
# =============================================================================

settings = minray.Settings(N_ray=500, distance_per_ray=60.0, rng_seed=7)
settings.set_eigenmode(N_inactive=10, N_active=20)
settings.set_dead_zone(40.0)

result = minray.run(minray.Simulation(lattice, settings))
