# ======================================================================================
# Run
# ======================================================================================


def run(simulation):
    """
    Solve the k-eigenvalue problem of the simulation and write its output

    Returns
    -------
    Result
        Read-only snapshot of the eigenvalue and scalar flux estimates
    """
    import minray.print_ as print_module
    from mpi4py import MPI

    # Timer: total
    time_total_start = MPI.Wtime()

    settings = simulation.settings

    # Override settings with command-line arguments
    import minray.config as config

    if config.args.N_ray is not None:
        settings.N_ray = config.args.N_ray
    if config.args.distance_per_ray is not None:
        settings.distance_per_ray = config.args.distance_per_ray
    if config.args.distance_inactive is not None:
        settings.distance_inactive = config.args.distance_inactive
    if config.args.N_inactive is not None or config.args.N_active is not None:
        N_inactive = config.args.N_inactive
        N_active = config.args.N_active
        if N_inactive is None:
            N_inactive = settings.N_inactive
        if N_active is None:
            N_active = settings.N_active
        settings.set_eigenmode(N_inactive, N_active, settings.k_init)
    if config.args.seed is not None:
        settings.rng_seed = config.args.seed
    if config.args.output is not None:
        settings.output_name = config.args.output
    if config.args.progress_bar is not None:
        settings.use_progress_bar = config.args.progress_bar
    if config.args.plot:
        settings.save_plot = True

    # ==================================================================================
    # Preparation
    # ==================================================================================

    # Timer: preparation
    time_prep_start = MPI.Wtime()

    state_arr, xs, flux, history = preparation(simulation)
    state = state_arr[0]

    # Print headers
    print_module.print_banner()
    print_module.print_configuration()
    print_module.print_input_summary(state, estimate_memory(xs, flux, state))

    # Timer: preparation
    time_prep_end = MPI.Wtime()

    # ==================================================================================
    # Running the simulation
    # ==================================================================================

    # Timer: simulation
    time_simulation_start = MPI.Wtime()

    import minray.transport.simulation as simulation_module

    simulation_module.eigenvalue_simulation(
        state_arr, xs, flux, history, settings.use_progress_bar
    )

    # Timer: simulation
    time_simulation_end = MPI.Wtime()

    # ==================================================================================
    # Working on the output
    # ==================================================================================

    import minray.output as output_module
    import minray.transport.tally as tally_module

    # Timer: output
    time_output_start = MPI.Wtime()

    flux_mean, flux_sdev = tally_module.closeout.finalize(state, flux)

    # Generate hdf5 output file
    output_module.generate_output(simulation, state, history, flux_mean, flux_sdev)
    if settings.save_plot and state["mpi_master"]:
        output_module.plot_vtk(
            settings.output_name + ".vtk",
            flux_mean,
            xs.material_ID,
            state["settings"]["N_cell_per_dimension"],
            state["settings"]["cell_width"],
        )

    # Timer: output
    time_output_end = MPI.Wtime()

    # Final barrier
    MPI.COMM_WORLD.Barrier()

    # Timer: total
    time_total_end = MPI.Wtime()

    # Manage timers
    state["runtime_total"] = time_total_end - time_total_start
    state["runtime_preparation"] = time_prep_end - time_prep_start
    state["runtime_simulation"] = time_simulation_end - time_simulation_start
    state["runtime_output"] = time_output_end - time_output_start
    output_module.create_runtime_datasets(state, settings.output_name)

    print_module.print_results(state)
    print_module.print_runtime(state)

    return output_module.make_result(simulation, state, history, flux_mean, flux_sdev)


# ======================================================================================
# Preparation
# ======================================================================================


def preparation(simulation):
    """
    Build the runtime state record and arrays from the input objects

    Returns
    -------
    state_arr : numpy.ndarray
        Size-1 array of the `state` record, holding the settings
    xs : CrossSectionData
    flux : FluxData
    history : IterationHistory
    """
    import numpy as np

    from mpi4py import MPI

    import minray.object_.numba_types as type_
    import minray.transport.tally as tally_module

    from minray.object_.settings import default_max_intersections
    from minray.print_ import print_warning

    settings = simulation.settings
    lattice = simulation.lattice
    settings.check()

    # ==================================================================================
    # Settings record
    # ==================================================================================

    state_arr = np.zeros(1, type_.state)
    settings_arr = state_arr["settings"]

    N = lattice.N
    N_cell = N * N
    cell_width = lattice.cell_width
    distance_active = settings.distance_per_ray - settings.distance_inactive
    max_intersections = settings.max_intersections_per_ray
    max_intersections_default = default_max_intersections(
        settings.distance_per_ray, cell_width
    )
    if max_intersections == 0:
        max_intersections = max_intersections_default
    elif max_intersections < max_intersections_default:
        print_warning(
            f"max_intersections_per_ray ({max_intersections}) is below the "
            f"{max_intersections_default} a ray of {settings.distance_per_ray} cm "
            "may need; expect truncated rays"
        )
    if settings.distance_inactive == 0.0:
        print_warning(
            "No dead zone: rays start with zero angular flux, which biases the flux "
            "and k-eff low by about 1 / (Sigma_t * distance_per_ray); "
            "see Settings.set_dead_zone"
        )

    # Lattice
    settings_arr["N_cell_per_dimension"][0] = N
    settings_arr["N_cell"][0] = N_cell
    settings_arr["N_material"][0] = len(lattice.materials)
    settings_arr["length_per_dimension"][0] = lattice.length
    settings_arr["cell_width"][0] = cell_width
    settings_arr["inverse_cell_width"][0] = 1.0 / cell_width
    settings_arr["cell_volume"][0] = 1.0 / N_cell
    (
        settings_arr["bc_x_minus"][0],
        settings_arr["bc_x_plus"][0],
        settings_arr["bc_y_minus"][0],
        settings_arr["bc_y_plus"][0],
    ) = lattice.boundary_conditions()

    # Energy
    settings_arr["G"][0] = lattice.G

    # Rays
    total_track_length = distance_active * settings.N_ray
    settings_arr["N_ray"][0] = settings.N_ray
    settings_arr["distance_per_ray"][0] = settings.distance_per_ray
    settings_arr["distance_inactive"][0] = settings.distance_inactive
    settings_arr["max_intersections_per_ray"][0] = max_intersections
    settings_arr["cell_expected_track_length"][0] = total_track_length / N_cell
    settings_arr["inverse_total_track_length"][0] = 1.0 / total_track_length
    settings_arr["rng_seed"][0] = settings.rng_seed

    # Power iteration
    settings_arr["N_inactive"][0] = settings.N_inactive
    settings_arr["N_active"][0] = settings.N_active
    settings_arr["N_iteration"][0] = settings.N_iteration
    settings_arr["k_init"][0] = settings.k_init

    # ==================================================================================
    # Cross sections and cell flux
    # ==================================================================================

    materials = lattice.materials
    xs = type_.CrossSectionData(
        material_ID=lattice.material_map.flatten(),
        total=np.array([material.total for material in materials]),
        fission=np.array([material.fission for material in materials]),
        nu_fission=np.array([material.nu_fission for material in materials]),
        chi=np.array([material.chi for material in materials]),
        scatter=np.array([material.scatter for material in materials]),
    )
    flux = type_.make_flux_data(N_cell, lattice.G)
    history = type_.make_iteration_history(settings.N_iteration)

    # ==================================================================================
    # Simulation state
    # ==================================================================================

    state = state_arr[0]

    # MPI
    state["mpi_size"] = MPI.COMM_WORLD.Get_size()
    state["mpi_rank"] = MPI.COMM_WORLD.Get_rank()
    state["mpi_master"] = state["mpi_rank"] == 0

    # Initial guess
    state["k_eff"] = settings.k_init
    state["fission_source"] = tally_module.closeout.compute_fission_source(
        flux.scalar_flux, xs, state["settings"]
    )

    return state_arr, xs, flux, history


def estimate_memory(xs, flux, state):
    """Bytes held by the cross sections, the cell flux, and one ray's buffers"""
    import minray.object_.numba_types as type_

    size = sum(array.nbytes for array in xs)
    size += sum(array.nbytes for array in flux)
    size += state["settings"]["max_intersections_per_ray"] * type_.intersection.itemsize
    size += type_.ray.itemsize
    return size


# ======================================================================================
# Visualize geometry
# ======================================================================================


def visualize(simulation, colors=None, save_as=None):
    """
    2D visualization of the lattice material map

    Parameters
    ----------
    simulation : Simulation
    colors : dict, optional
        Pairs of material and its color
    save_as : str, optional
        Save the figure to `<save_as>.png` instead of showing it
    """
    import matplotlib.pyplot as plt
    import numpy as np

    from matplotlib import colors as mpl_colors

    lattice = simulation.lattice
    materials = lattice.materials

    # Color assignment for materials (by material index)
    if colors is not None:
        new_colors = {}
        for material, color in colors.items():
            new_colors[materials.index(material)] = mpl_colors.to_rgb(color)
        colors = new_colors
    else:
        colors = {}
        for i in range(len(materials)):
            colors[i] = plt.cm.Set1(i)[:-1]
    WHITE = mpl_colors.to_rgb("white")

    # RGB color data for each cell, indexed [y, x]
    N = lattice.N
    pixel_data = np.zeros((N, N, 3))
    for iy in range(N):
        for ix in range(N):
            pixel_data[iy, ix] = colors.get(lattice.material_map[iy, ix], WHITE)

    extent = [0.0, lattice.length, 0.0, lattice.length]
    plt.imshow(pixel_data, origin="lower", extent=extent)
    plt.xlabel("x [cm]")
    plt.ylabel("y [cm]")
    plt.title(f"{N} x {N} lattice")
    if save_as is not None:
        plt.savefig(save_as + ".png")
        plt.clf()
    else:
        plt.show()
