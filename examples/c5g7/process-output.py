import numpy as np
import matplotlib.pyplot as plt
import h5py

# Load result
with h5py.File("output.h5", "r") as f:
    length = f["lattice/length"][()]
    k_cycle = f["k_cycle"][:]
    k_mean = f["k_mean"][()]
    k_sdev = f["k_sdev"][()]
    phi = f["flux/mean"][:]
    miss = f["missed_ray_fraction"][:]

print(f"\nk-eff: {k_mean:.5f} +/- {k_sdev:.5f}")
print(f"Max miss rate: {np.max(miss):.2e}\n")

# Eigenvalue history
plt.plot(np.arange(1, len(k_cycle) + 1), k_cycle, "-o")
plt.axhline(k_mean, color="k", linestyle="--")
plt.xlabel("Iteration")
plt.ylabel("$k$")
plt.show()

# Fast and thermal flux
#   The indexing is [x, y, g]
fig, ax = plt.subplots(1, 2)
extent = [0.0, length, 0.0, length]
for i, (g, title) in enumerate([(0, "Fast flux"), (-1, "Thermal flux")]):
    plot = ax[i].imshow(phi[:, :, g].T, origin="lower", extent=extent)
    fig.colorbar(plot, ax=ax[i])
    ax[i].set_title(title)
    ax[i].set_xlabel("$x$ [cm]")
    ax[i].set_ylabel("$y$ [cm]")
plt.show()
