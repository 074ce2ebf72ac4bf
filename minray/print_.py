import numba as nb
import sys

from colorama import Fore, Style
from mpi4py import MPI

from minray.constant import MISS_RATE_WARNING

master = MPI.COMM_WORLD.Get_rank() == 0


def print_1d_array(arr):
    N = len(arr)
    if N > 5:
        return f"(size={len(arr)}): [{arr[0]:.5g}, {arr[1]:.5g}, ..., {arr[-2]:.5g}, {arr[-1]:.5g}]"
    else:
        text = f"(size={len(arr)}): ["
        for i in range(N):
            text += f"{arr[i]:.5g}, "
        if N > 0:
            text = text[:-2]
        text += "]"
        return text


def print_msg(msg):
    if master:
        print(msg)
        sys.stdout.flush()


def print_error(text):
    print(Fore.RED + f"[ERROR]: {text}\n")
    print(Style.RESET_ALL)
    sys.stdout.flush()
    sys.exit(1)


def print_warning(text):
    if master:
        print(Fore.YELLOW + f"[WARNING]: {text}\n")
        print(Style.RESET_ALL)
        sys.stdout.flush()


# ======================================================================================
# Headers
# ======================================================================================


def print_banner():
    if not master:
        return
    print(
        "\n"
        + r"  __  __ _       ____               "
        + "\n"
        + r" |  \/  (_)_ __ |  _ \ __ _ _   _   "
        + "\n"
        + r" | |\/| | | '_ \| |_) / _` | | | |  "
        + "\n"
        + r" | |  | | | | | |  _ < (_| | |_| |  "
        + "\n"
        + r" |_|  |_|_|_| |_|_| \_\__,_|\__, |  "
        + "\n"
        + r"                            |___/   "
        + "\n"
    )
    sys.stdout.flush()


def print_configuration():
    if not master:
        return
    mode = "Python" if nb.config.DISABLE_JIT else "Numba"
    mpi_size = MPI.COMM_WORLD.Get_size()

    text = ""
    text += f"           Mode | {mode}\n"
    text += f"  MPI Processes | {mpi_size}\n"
    print(text)
    sys.stdout.flush()


def print_input_summary(state, memory_bytes):
    if not master:
        return
    settings = state["settings"]
    MB = memory_bytes / 1024.0 / 1024.0

    text = " Input summary:\n"
    text += f"   Cells per dimension        | {settings['N_cell_per_dimension']}\n"
    text += f"   Total cells (FSRs)         | {settings['N_cell']:,}\n"
    text += f"   Rays per iteration         | {settings['N_ray']:,}\n"
    text += f"   Distance per ray [cm]      | {settings['distance_per_ray']:.2f}\n"
    text += f"   Dead zone per ray [cm]     | {settings['distance_inactive']:.2f}\n"
    text += f"   Energy groups              | {settings['G']}\n"
    text += f"   Inactive iterations        | {settings['N_inactive']}\n"
    text += f"   Active iterations          | {settings['N_active']}\n"
    text += f"   Random seed                | {settings['rng_seed']}\n"
    text += f"   Max intersections per ray  | {settings['max_intersections_per_ray']}\n"
    text += f"   Estimated memory usage     | {MB:.2f} MB\n"
    print(text)
    sys.stdout.flush()


def print_eigenvalue_header():
    if master:
        print("\n #     k        Miss rate  k (avg)            ")
        print(" ====  =======  =========  ===================")
        sys.stdout.flush()


# ======================================================================================
# Progress
# ======================================================================================


def print_progress_eigenvalue(state):
    if not master:
        return

    idx_iteration = state["idx_iteration"]
    k_eff = state["k_eff"]
    k_avg = state["k_avg_running"]
    k_sdv = state["k_sdv_running"]
    percent_missed = 100.0 * state["N_missed_ray"] / state["settings"]["N_ray"]

    miss_rate = "%.2e" % (percent_missed / 100.0)
    if percent_missed > MISS_RATE_WARNING:
        miss_rate = Fore.RED + miss_rate + Style.RESET_ALL

    if not state["iteration_active"]:
        print(" %-4i  %.5f  %s" % (idx_iteration + 1, k_eff, miss_rate))
    else:
        print(
            " %-4i  %.5f  %s   %.5f +/- %.5f"
            % (idx_iteration + 1, k_eff, miss_rate, k_avg, k_sdv)
        )
    sys.stdout.flush()


# ======================================================================================
# Results
# ======================================================================================


def print_results(state):
    if not master:
        return
    settings = state["settings"]
    N_iteration = settings["N_iteration"]
    N_intersection = state["N_intersection_total"]
    N_integration = N_intersection * settings["G"]

    text = "\n Results:\n"
    text += f"   k-effective                | {state['k_avg_running']:.5f}\n"
    text += f"   k-effective std. dev.      | {state['k_sdv_running']:.5f}\n"
    text += f"   Geometric intersections    | {N_intersection:.3e}\n"
    text += f"   Avg. intersections per ray | {N_intersection / (settings['N_ray'] * N_iteration):.1f}\n"
    text += f"   Integrations               | {N_integration:.3e}\n"
    if N_integration > 0:
        tpi = state["runtime_simulation"] * 1.0e9 / N_integration
        text += f"   Time per integration       | {tpi:.3f} ns\n"
    text += f"   Missed rays (total)        | {state['N_missed_ray_total']}\n"
    print(text)
    sys.stdout.flush()


def print_time(tag, t, percent):
    if t >= 24 * 60 * 60:
        print("   %s | %.2f days (%.1f%%)" % (tag, t / 24 / 60 / 60, percent))
    elif t >= 60 * 60:
        print("   %s | %.2f hours (%.1f%%)" % (tag, t / 60 / 60, percent))
    elif t >= 60:
        print("   %s | %.2f minutes (%.1f%%)" % (tag, t / 60, percent))
    else:
        print("   %s | %.2f seconds (%.1f%%)" % (tag, t, percent))


def print_runtime(state):
    if not master:
        return
    total = state["runtime_total"]
    preparation = state["runtime_preparation"]
    simulation = state["runtime_simulation"]
    sweep = state["runtime_transport_sweep"]
    output = state["runtime_output"]
    print("\n Runtime report:")
    print_time("Total          ", total, 100)
    print_time("Preparation    ", preparation, preparation / total * 100)
    print_time("Simulation     ", simulation, simulation / total * 100)
    print_time("  Sweep        ", sweep, sweep / total * 100)
    print_time("Output         ", output, output / total * 100)
    print("\n")
    sys.stdout.flush()
