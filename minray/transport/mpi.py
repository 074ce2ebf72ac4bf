import math

from numba import njit


@njit
def distribute_work(N_work, state):
    """Assign each rank a contiguous range of ray indices"""
    size = state["mpi_size"]
    rank = state["mpi_rank"]

    # Evenly distribute work
    work_size = math.floor(N_work / size)

    # Starting index (based on even distribution)
    work_start = work_size * rank

    # Count reminder
    rem = N_work % size

    # Assign reminder and update starting index
    if rank < rem:
        work_size += 1
        work_start += rank
    else:
        work_start += rem

    # Store the workload specification
    state["mpi_work_start"] = work_start
    state["mpi_work_size"] = work_size
    state["mpi_work_size_total"] = N_work
