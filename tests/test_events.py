"""Module for testing the event queue."""


import math

import pytest
import simpy

from factorysim.errors import CausalityError, DispatchError, SimulationError
from factorysim.events import EventKind, EventQueue


@pytest.fixture
def queue():
    return EventQueue(simpy.Environment())


def record_into(seen, queue):
    def handler(event):
        seen.append((queue.now, event.payload["n"]))

    return handler


def test_events_dispatch_in_time_order_fifo_on_ties(queue):
    seen = []
    queue.register(EventKind.ARRIVAL, record_into(seen, queue))
    for n in range(3):
        queue.schedule(1.0, EventKind.ARRIVAL, n=n)
    queue.schedule(0.5, EventKind.ARRIVAL, n=3)

    assert queue.run_until(10.0) == 4
    assert seen == [(0.5, 3), (1.0, 0), (1.0, 1), (1.0, 2)]
    assert [e.seq for e in queue.history] == [3, 0, 1, 2]


def test_clock_only_moves_to_dispatched_events(queue):
    queue.register(EventKind.ARRIVAL, lambda event: None)
    queue.schedule(2.0, EventKind.ARRIVAL)

    queue.run_until(100.0)

    assert queue.now == 2.0
    assert queue.pending == 0
    assert math.isinf(queue.next_time)


def test_event_at_horizon_is_not_dispatched(queue):
    seen = []
    queue.register(EventKind.ARRIVAL, record_into(seen, queue))
    queue.schedule(5.0, EventKind.ARRIVAL, n=0)

    assert queue.run_until(5.0) == 0
    assert queue.pending == 1
    assert queue.now == 0

    queue.run_until(5.1)
    assert seen == [(5.0, 0)]


def test_handlers_schedule_follow_up_events(queue):
    seen = []

    def handler(event):
        n = event.payload["n"]
        seen.append((queue.now, n))
        if n < 3:
            queue.schedule(queue.now + 1.5, EventKind.ARRIVAL, n=n + 1)

    queue.register(EventKind.ARRIVAL, handler)
    queue.schedule(0.0, EventKind.ARRIVAL, n=0)
    queue.run_until(100.0)

    assert seen == [(0.0, 0), (1.5, 1), (3.0, 2), (4.5, 3)]


def test_scheduling_into_the_past_is_rejected(queue):
    def handler(event):
        queue.schedule(queue.now - 0.1, EventKind.ARRIVAL)

    queue.register(EventKind.ARRIVAL, handler)
    queue.schedule(1.0, EventKind.ARRIVAL)

    with pytest.raises(CausalityError):
        queue.run_until(10.0)
    assert queue.now == 1.0


def test_schedule_requires_registered_handler(queue):
    with pytest.raises(DispatchError) as e:
        queue.schedule(1.0, EventKind.SHIFT_CHANGE)

    assert isinstance(e.value, SimulationError)
    assert queue.pending == 0


def test_event_as_dict_flattens_payload(queue):
    queue.register(EventKind.BREAKDOWN, lambda event: None)
    event = queue.schedule(3.0, EventKind.BREAKDOWN, resource_class="machines")

    assert event.as_dict() == {
        "seq": 0,
        "time": 3.0,
        "kind": "breakdown",
        "resource_class": "machines",
    }
