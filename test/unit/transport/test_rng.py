import numpy as np
import pytest

####

import minray.object_.numba_types as type_

from minray.transport.rng import iteration_seed, lcg, split_seed


@pytest.fixture
def ray_container():
    container = np.zeros(1, type_.ray)
    container[0]["rng_seed"] = split_seed(np.uint64(3), np.uint64(42))
    return container


def test_split_seed_deterministic():
    assert split_seed(np.uint64(5), np.uint64(1)) == split_seed(np.uint64(5), np.uint64(1))


def test_split_seed_distinct_keys():
    seeds = {int(split_seed(np.uint64(i), np.uint64(1))) for i in range(100)}
    assert len(seeds) == 100


def test_split_seed_distinct_seeds():
    assert split_seed(np.uint64(5), np.uint64(1)) != split_seed(np.uint64(5), np.uint64(2))


def test_iteration_seed_matches_split_seed():
    assert iteration_seed(4, 9) == split_seed(np.uint64(4), np.uint64(9))


def test_lcg_unit_interval(ray_container):
    values = [lcg(ray_container) for _ in range(1000)]
    assert min(values) >= 0.0
    assert max(values) < 1.0
    assert 0.4 < np.mean(values) < 0.6


def test_lcg_stream_reproducible(ray_container):
    other = ray_container.copy()
    first = [lcg(ray_container) for _ in range(10)]
    second = [lcg(other) for _ in range(10)]
    assert first == second
