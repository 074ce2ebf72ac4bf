import h5py
import numpy as np

# Analytic infinite-medium eigenvalue: largest eigenvalue of
#   (Sigma_t - Sigma_s^T)^-1 chi nu_fission^T
total = np.array([0.30, 1.00])
scatter = np.array([[0.24, 0.04], [0.00, 0.90]])
nu_fission = np.array([0.010, 0.10])
chi = np.array([1.0, 0.0])

A = np.diag(total) - scatter.T
F = np.outer(chi, nu_fission)
k_inf = max(abs(np.linalg.eigvals(np.linalg.solve(A, F))))

with h5py.File("output.h5", "r") as f:
    k_mean = f["k_mean"][()]
    k_sdev = f["k_sdev"][()]
    phi = f["flux/mean"][:]

print(f"\nk-inf (analytic): {k_inf:.5f}")
print(f"k-eff (MinRay)  : {k_mean:.5f} +/- {k_sdev:.5f}")
print(f"Fast/thermal flux ratio: {np.mean(phi[:, :, 0]) / np.mean(phi[:, :, 1]):.4f}\n")
