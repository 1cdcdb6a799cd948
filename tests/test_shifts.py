"""Module for testing shift changes and maintenance."""


import pytest

from factorysim.events import EventKind
from factorysim.simulation import Simulation


@pytest.fixture
def small_factory():
    return Simulation(
        capacities={"machines": 2, "operators": 2},
        arrivals={},
        shift_length=8.0,
        seed=0,
        start="2024-01-01",
    )


def event_times(sim, kind):
    return [e.time for e in sim.history if e.kind == kind]


def test_shift_changes_recur_every_shift_length(small_factory):
    small_factory.run(horizon=40.0)

    assert event_times(small_factory, EventKind.SHIFT_CHANGE) == [
        8.0, 16.0, 24.0, 32.0
    ]
    assert small_factory.shifts.shift_changes == 4


def test_shift_change_resets_held_units(small_factory):
    sim = small_factory
    sim.schedule_arrival("ProductA", at=7.0)

    sim.run(horizon=7.5)
    assert sim.available["machines"] == 1

    sim.run(horizon=8.5)
    assert sim.available == {"machines": 2, "operators": 2}

    # Machining ends at 9.5, its unit was already given back by the reset
    sim.run(horizon=10.0)
    assert sim.available == {"machines": 2, "operators": 1}

    sim.run(horizon=15.0)
    assert sim.statistics.finished_count == 1
    assert sim.available == sim.capacities


def test_breakdown_takes_unit_out_until_repaired():
    sim = Simulation(
        capacities={"machines": 1, "operators": 1},
        arrivals={},
        shift_length=None,
        seed=0,
    )
    sim.trigger_breakdown("machines", at=1.0)
    sim.schedule_arrival("ProductA", at=2.0)
    sim.schedule_arrival("ProductA", at=6.5)
    sim.run(horizon=50.0)

    assert event_times(sim, EventKind.MAINTENANCE_COMPLETE) == [6.0]
    assert sim.maintenance.breakdowns == 1
    assert sim.maintenance.repairs == 1
    assert sim.statistics.dropped_by_stage == {"machining": 1}
    assert sim.statistics.waiting_time["machines"] == pytest.approx(2.0)
    assert sim.statistics.finished_count == 1
    assert sim.available == sim.capacities


def test_breakdown_without_idle_unit_is_ignored():
    sim = Simulation(
        capacities={"machines": 0, "operators": 1},
        arrivals={},
        shift_length=None,
        seed=0,
    )
    sim.trigger_breakdown("machines")
    sim.run(horizon=50.0)

    assert sim.maintenance.breakdowns == 0
    assert event_times(sim, EventKind.MAINTENANCE_COMPLETE) == []


def test_repair_after_shift_change_does_not_exceed_capacity():
    sim = Simulation(
        capacities={"machines": 1, "operators": 1},
        arrivals={},
        shift_length=4.0,
        seed=0,
    )
    sim.trigger_breakdown("machines", at=3.0)
    sim.run(horizon=10.0)

    assert sim.maintenance.repairs == 1
    assert sim.available == {"machines": 1, "operators": 1}
