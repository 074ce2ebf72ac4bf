import argparse
import h5py
import numpy as np

import minray

# =============================================================================
# Problem size
# =============================================================================

# Validation problems: (size multiplier, inactive, active, seed)
VALIDATION = {
    "small": (1, 10, 10, 42),
    "medium": (4, 100, 100, 2001),
    "large": (16, 1000, 1000, 123456789),
}

parser = argparse.ArgumentParser(description="C5G7 quadrant")
parser.add_argument(
    "--multiplier", type=int, default=1, help="Cells per pin side, divided by two"
)
parser.add_argument("--validation", choices=list(VALIDATION), help="Validation problem")
args, _ = parser.parse_known_args()

multiplier = args.multiplier
N_inactive, N_active, seed = 10, 10, 1
if args.validation is not None:
    multiplier, N_inactive, N_active, seed = VALIDATION[args.validation]

# =============================================================================
# Materials
# =============================================================================

# Load material data
lib = h5py.File("c5g7_xs.h5", "r")


# Setter: the library scattering matrices are indexed [g_out, g_in]
def set_mat(mat, name):
    capture = mat["capture"][:]
    scatter = mat["scatter"][:]
    fission = mat["fission"][:]
    nu = mat["nu_p"][:] + np.sum(mat["nu_d"][:], axis=0)
    chi = mat["chi_p"][:]
    if chi.ndim == 2:
        chi = chi[:, 0]
    return minray.MaterialMG(
        total=capture + np.sum(scatter, 0) + fission,
        scatter=np.transpose(scatter),
        fission=fission,
        nu_fission=nu * fission,
        chi=chi if np.sum(chi) > 0.0 else None,
        name=name,
    )


# Material indices
UO2, MOX43, MOX70, MOX87, FC, GT, MOD, CR = range(8)
materials = [
    set_mat(lib["uo2"], "UO2"),
    set_mat(lib["mox43"], "MOX 4.3%"),
    set_mat(lib["mox7"], "MOX 7.0%"),
    set_mat(lib["mox87"], "MOX 8.7%"),
    set_mat(lib["fc"], "Fission chamber"),
    set_mat(lib["gt"], "Guide tube"),
    set_mat(lib["mod"], "Moderator"),
    set_mat(lib["cr"], "Control rod"),
]
lib.close()

# =============================================================================
# Assemblies
# =============================================================================

pitch = 1.26
radius = 0.54
cells_per_pin = 2 * multiplier

# 17 x 17 assembly pin positions
guide_tubes = [
    (2, 5), (2, 8), (2, 11), (3, 3), (3, 13), (5, 2), (5, 5), (5, 8),
    (5, 11), (5, 14), (8, 2), (8, 5), (8, 11), (8, 14), (11, 2), (11, 5),
    (11, 8), (11, 11), (11, 14), (13, 3), (13, 13), (14, 5), (14, 8), (14, 11),
]  # fmt: skip


def assembly_pins(fuel):
    pins = np.full((17, 17), fuel)
    for i, j in guide_tubes:
        pins[i, j] = GT
    pins[8, 8] = FC
    return pins


def mox_pins():
    pins = assembly_pins(MOX87)
    for i in range(17):
        for j in range(17):
            if pins[i, j] != MOX87:
                continue
            # Simplified zoning by distance to the assembly edge
            d = min(i, j, 16 - i, 16 - j)
            if d == 0:
                pins[i, j] = MOX43
            elif d == 1:
                pins[i, j] = MOX70
    return pins


uo2_assembly = assembly_pins(UO2)
mox_assembly = mox_pins()
water_assembly = np.full((17, 17), MOD)

# Core quadrant: the reflective corner is at (x+, y-)
assembly_layout = [
    [water_assembly, mox_assembly, uo2_assembly],  # y = 0
    [water_assembly, uo2_assembly, mox_assembly],
    [water_assembly, water_assembly, water_assembly],
]
pin_map = np.block(assembly_layout)

# =============================================================================
# Lattice
# =============================================================================

# Pixelate the pins: cells whose center is outside the fuel radius are moderator
n = cells_per_pin
offset = (np.arange(n) + 0.5) * pitch / n - pitch / 2
X, Y = np.meshgrid(offset, offset)
inside = X**2 + Y**2 < radius**2

material_map = np.kron(pin_map, np.ones((n, n), dtype=int))
moderator = np.tile(~inside, pin_map.shape)
material_map[moderator] = MOD

lattice = minray.Lattice(
    materials=materials,
    material_map=material_map,
    length=pitch * pin_map.shape[0],
    x_minus="vacuum",
    x_plus="reflective",
    y_minus="reflective",
    y_plus="vacuum",
)

# =============================================================================
# Set settings and run MinRay
# =============================================================================

settings = minray.Settings(
    N_ray=6170 * multiplier + 1955,
    distance_per_ray=50.0,
    rng_seed=seed,
)
settings.set_eigenmode(N_inactive=N_inactive, N_active=N_active)
settings.set_dead_zone(30.0)

simulation = minray.Simulation(lattice, settings)
minray.visualize(simulation, save_as="c5g7_lattice")
minray.run(simulation)
