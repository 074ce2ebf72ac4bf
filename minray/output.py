import h5py
import importlib.metadata
import numpy as np

from dataclasses import dataclass

####

import minray.print_ as print_module

# ======================================================================================
# Main output
# ======================================================================================


def generate_output(simulation, state, history, flux_mean, flux_sdev):
    if not state["mpi_master"]:
        return

    settings = simulation.settings
    lattice = simulation.lattice
    N = lattice.N
    G = lattice.G

    # Header
    if settings.use_progress_bar:
        print_module.print_msg("")
    print_module.print_msg(" Generating output HDF5 files...")

    # Create the file
    file = h5py.File(settings.output_name + ".h5", "w")

    # Version
    file["version"] = importlib.metadata.version("minray")

    # Input objects
    create_object_dataset(file, "settings", settings)
    file.create_dataset("lattice/length", data=lattice.length)
    file.create_dataset("lattice/N", data=N)
    file.create_dataset(
        "lattice/boundary_conditions", data=np.array(lattice.boundary_conditions())
    )

    # Eigenvalues
    file.create_dataset("k_cycle", data=history.k_cycle)
    file.create_dataset("k_mean", data=state["k_avg_running"])
    file.create_dataset("k_sdev", data=state["k_sdv_running"])

    # Scalar flux, indexed [x, y, g]
    file.create_dataset("flux/mean", data=to_lattice_layout(flux_mean, N, G))
    file.create_dataset("flux/sdev", data=to_lattice_layout(flux_sdev, N, G))
    file.create_dataset("material_ID", data=np.transpose(lattice.material_map))

    # Sweep diagnostics
    file.create_dataset("missed_ray_fraction", data=history.missed_ray_fraction)
    file.create_dataset("N_intersection", data=history.N_intersection)

    # Close the file
    file.close()


def to_lattice_layout(values, N, G):
    """Cell-ordered [cell, g] values as [x, y, g]"""
    return np.transpose(np.reshape(values, (N, N, G)), (1, 0, 2))


# ======================================================================================
# Input objects
# ======================================================================================


def create_object_dataset(file, group_name, object_):
    for name in [
        x
        for x in dir(object_)
        if (not x.startswith("__") and not callable(getattr(object_, x)))
    ]:
        file[f"{group_name}/{name}"] = getattr(object_, name)


# ======================================================================================
# Runtimes
# ======================================================================================


def create_runtime_datasets(state, output_name):
    import minray.config as config

    if not state["mpi_master"]:
        return

    main_output = h5py.File(f"{output_name}.h5", "a")
    create_runtime_dataset(main_output, state)
    main_output.close()

    if config.args.runtime_output:
        runtime_output = h5py.File(f"{output_name}-runtime.h5", "w")
        create_runtime_dataset(runtime_output, state)
        runtime_output.close()


def create_runtime_dataset(file, state):
    for name in [
        "total",
        "preparation",
        "simulation",
        "transport_sweep",
        "output",
    ]:
        file.create_dataset(
            f"runtime/{name}", data=np.array([state["runtime_" + name]])
        )


# ======================================================================================
# VTK plot
# ======================================================================================


def plot_vtk(file_name, flux_mean, material_ID, N, cell_width):
    """
    Legacy binary VTK file of the fast flux (first group), the thermal flux (last
    group), and the material index on the N x N lattice

    Point data run in cell order (x fastest), stored big-endian as the legacy
    format requires.
    """
    print_module.print_msg(f" Plotting {N} x {N} lattice to {file_name}...")

    with open(file_name, "wb") as file:
        header = "# vtk DataFile Version 2.0\n"
        header += "Dataset File\n"
        header += "BINARY\n"
        header += "DATASET STRUCTURED_POINTS\n"
        header += f"DIMENSIONS {N} {N} 1\n"
        header += "ORIGIN 0 0 0\n"
        header += f"SPACING {cell_width:f} {cell_width:f} {cell_width:f}\n"
        header += f"POINT_DATA {N * N}\n"
        file.write(header.encode("ascii"))

        file.write(b"SCALARS thermal_flux float\nLOOKUP_TABLE default\n")
        file.write(np.asarray(flux_mean[:, -1], dtype=">f4").tobytes())
        file.write(b"SCALARS fast_flux float\nLOOKUP_TABLE default\n")
        file.write(np.asarray(flux_mean[:, 0], dtype=">f4").tobytes())
        file.write(b"SCALARS material_type int\nLOOKUP_TABLE default\n")
        file.write(np.asarray(material_ID, dtype=">i4").tobytes())


# ======================================================================================
# Result
# ======================================================================================


@dataclass(frozen=True)
class Result:
    """
    Outcome of a run

    Arrays are read-only snapshots; flux and material arrays are indexed [x, y, g]
    and [x, y].
    """

    k_mean: float
    k_sdev: float
    k_cycle: np.ndarray
    flux_mean: np.ndarray
    flux_sdev: np.ndarray
    material_ID: np.ndarray
    missed_ray_fraction: np.ndarray
    N_intersection: np.ndarray


def make_result(simulation, state, history, flux_mean, flux_sdev):
    N = simulation.lattice.N
    G = simulation.lattice.G

    def snapshot(array):
        array = np.array(array)
        array.setflags(write=False)
        return array

    return Result(
        k_mean=float(state["k_avg_running"]),
        k_sdev=float(state["k_sdv_running"]),
        k_cycle=snapshot(history.k_cycle),
        flux_mean=snapshot(to_lattice_layout(flux_mean, N, G)),
        flux_sdev=snapshot(to_lattice_layout(flux_sdev, N, G)),
        material_ID=snapshot(np.transpose(simulation.lattice.material_map)),
        missed_ray_fraction=snapshot(history.missed_ray_fraction),
        N_intersection=snapshot(history.N_intersection),
    )
