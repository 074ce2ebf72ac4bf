import numpy as np
import minray

# =============================================================================
# Set model
# =============================================================================

# One-group materials
fuel = minray.MaterialMG(
    total=[0.45], scatter=[[0.35]], fission=[0.04], nu_fission=[0.10], name="fuel"
)
water = minray.MaterialMG(total=[1.20], scatter=[[1.19]], name="water")

# Pixelated pin of radius 0.45 cm in a 1.26 cm pitch
N = 20
pitch = 1.26
radius = 0.45
center = (np.arange(N) + 0.5) * pitch / N - pitch / 2
X, Y = np.meshgrid(center, center)
material_map = np.where(X**2 + Y**2 < radius**2, 0, 1)

# Write the map in cell order and read it back
np.savetxt("pincell_map.txt", material_map.flatten(), fmt="%d")
material_map = minray.Lattice.material_map_from_file("pincell_map.txt", N)

lattice = minray.Lattice(
    materials=[fuel, water],
    material_map=material_map,
    length=pitch,
    x_minus="reflective",
    x_plus="reflective",
    y_minus="reflective",
    y_plus="reflective",
)

# =============================================================================
# Set settings and run MinRay
# =============================================================================

settings = minray.Settings(N_ray=1000, distance_per_ray=60.0)
settings.set_eigenmode(N_inactive=20, N_active=30)
settings.set_dead_zone(30.0)

minray.run(minray.Simulation(lattice, settings))
