"""Module for testing resource pools."""


from collections import defaultdict

import pytest
import simpy

from factorysim.errors import ResourceError
from factorysim.resources import Lease, ResourcePool


@pytest.fixture
def pool():
    env = simpy.Environment()
    env.monitor = -1
    env.data = defaultdict(list)
    return ResourcePool(env, {"machines": 2, "operators": 1})


def test_acquire_until_exhausted(pool):
    first = pool.try_acquire("machines")
    second = pool.try_acquire("machines")

    assert first == Lease("machines", 0)
    assert second
    assert pool.try_acquire("machines") is None
    assert pool.available == {"machines": 0, "operators": 1}
    assert pool.in_use("machines") == 2


def test_release_restores_availability(pool):
    lease = pool.try_acquire("operators")

    assert pool.release(lease)
    assert pool.available["operators"] == 1


def test_double_release_is_an_error(pool):
    lease = pool.try_acquire("operators")
    pool.release(lease)

    with pytest.raises(ResourceError):
        pool.release(lease)
    assert pool.available["operators"] == 1


def test_reset_abandons_held_units(pool):
    lease = pool.try_acquire("machines")
    pool.reset_to_full()

    assert pool.available["machines"] == 2
    assert pool.release(lease) is False
    assert pool.available["machines"] == 2


def test_unknown_resource_class(pool):
    assert "robots" not in pool
    with pytest.raises(ResourceError):
        pool.try_acquire("robots")


def test_negative_capacity_is_rejected():
    with pytest.raises(ResourceError):
        ResourcePool(simpy.Environment(), {"machines": -1})


def test_availability_is_monitored(pool):
    pool.try_acquire("machines")
    pool.reset_to_full()

    df = pool.data_df
    machines = df[df["key"] == "machines_available"]["value"].tolist()
    assert machines == [1, 2]
