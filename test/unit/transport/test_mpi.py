import numpy as np

####

import minray.object_.numba_types as type_

from minray.transport.mpi import distribute_work


def work_of(N_work, size, rank):
    state_arr = np.zeros(1, type_.state)
    state = state_arr[0]
    state["mpi_size"] = size
    state["mpi_rank"] = rank
    distribute_work(N_work, state)
    return state["mpi_work_start"], state["mpi_work_size"], state["mpi_work_size_total"]


def test_single_rank():
    assert work_of(10, 1, 0) == (0, 10, 10)


def test_remainder_goes_to_first_ranks():
    assert [work_of(10, 3, rank)[:2] for rank in range(3)] == [(0, 4), (4, 3), (7, 3)]


def test_ranges_cover_all_rays():
    N_work = 103
    size = 7
    covered = []
    for rank in range(size):
        start, work_size, _ = work_of(N_work, size, rank)
        covered.extend(range(start, start + work_size))
    assert covered == list(range(N_work))


def test_more_ranks_than_rays():
    sizes = [work_of(2, 4, rank)[1] for rank in range(4)]
    assert sizes == [1, 1, 0, 0]
