import h5py
import numpy as np
import subprocess
import sys

# Input deck run in a fresh interpreter; the mode is fixed at import of minray
DECK = """
import numpy as np
import minray

material = minray.MaterialMG(
    total=[1.0], scatter=[[0.5]], fission=[0.25], nu_fission=[0.6]
)
lattice = minray.Lattice([material], np.zeros((2, 2), dtype=int), 4.0)
settings = minray.Settings(
    N_ray=20, distance_per_ray=12.0, distance_inactive=10.0, rng_seed=3
)
settings.set_eigenmode(N_inactive=3, N_active=5)
minray.run(minray.Simulation(lattice, settings))
"""


def run_deck(tmp_path, mode):
    deck = tmp_path / "input.py"
    deck.write_text(DECK)
    output = tmp_path / f"output_{mode}"
    subprocess.run(
        [
            sys.executable,
            str(deck),
            f"--mode={mode}",
            f"--output={output}",
            "--no-progress_bar",
        ],
        cwd=tmp_path,
        check=True,
    )
    with h5py.File(f"{output}.h5", "r") as f:
        return f["k_cycle"][:], f["flux/mean"][:]


def test_numba_mode_matches_python_mode(tmp_path):
    k_python, flux_python = run_deck(tmp_path, "python")
    k_numba, flux_numba = run_deck(tmp_path, "numba")

    assert len(k_numba) == 8
    assert np.allclose(k_numba, k_python, rtol=1e-12, atol=0.0)
    assert np.allclose(flux_numba, flux_python, rtol=1e-12, atol=0.0)
