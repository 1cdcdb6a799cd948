"""Event queue and simulation clock."""


import enum
import itertools
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

import simpy

from factorysim.base import Base
from factorysim.errors import CausalityError, DispatchError


class EventKind(enum.Enum):
    ARRIVAL = "arrival"
    SETUP_COMPLETE = "setup_complete"
    PROCESSING_COMPLETE = "processing_complete"
    STAGE_RETRY = "stage_retry"
    BREAKDOWN = "breakdown"
    MAINTENANCE_COMPLETE = "maintenance_complete"
    SHIFT_CHANGE = "shift_change"


@dataclass(frozen=True)
class Event:
    """Scheduled unit of work.

    Events carry data only. The handler is looked up by `kind` when the event
    is dispatched, so the queue and its history can be inspected freely.
    """

    time: float
    kind: EventKind
    payload: Dict[str, Any] = field(default_factory=dict)
    seq: int = 0

    def as_dict(self) -> Dict[str, Any]:
        """Flat representation used by exporters."""
        out = {"seq": self.seq, "time": self.time, "kind": self.kind.value}
        for key, value in self.payload.items():
            out[key] = repr(value) if not isinstance(value, str) else value
        return out


Handler = Callable[[Event], None]


class EventQueue(Base):
    def __init__(
        self,
        env: simpy.Environment,
        handlers: Dict[EventKind, Handler] | None = None,
        name: str = "event-queue",
        uid: str | None = None,
    ):
        """Time-ordered queue of pending events driving the clock.

        Pending events live in the simpy environment heap, which orders by
        time and then by insertion, so events due at the same time are
        dispatched first in, first out.

        Args:
            env: Simpy environment.
            handlers (optional): Mapping of event kind -> handler. Handlers
                can also be registered later with `register`. Defaults to
                None.
            name (optional): Name of the queue. Defaults to "event-queue".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        self.handlers = dict(handlers or {})
        self.history: List[Event] = []
        self.pending = 0
        self._seq = itertools.count()

    def register(self, kind: EventKind, handler: Handler):
        self.handlers[kind] = handler

    def schedule(
        self, time: float, kind: EventKind, **payload: Any
    ) -> Event:
        """Schedule event of given kind at absolute simulation time.

        Raises:
            CausalityError: If `time` is before the current time.
            DispatchError: If no handler is registered for `kind`.
        """
        if time < self.now:
            raise CausalityError(time, self.now)
        if kind not in self.handlers:
            raise DispatchError(f"No handler registered for {kind}")

        event = Event(
            time=time, kind=kind, payload=payload, seq=next(self._seq)
        )
        timeout = self.env.timeout(time - self.now, value=event)
        timeout.callbacks.append(self._dispatch)
        self.pending += 1
        return event

    @property
    def next_time(self) -> float:
        """Time of the earliest pending event, infinity if none."""
        return self.env.peek()

    def run_until(self, horizon: float) -> int:
        """Dispatch events strictly before `horizon` in time order.

        Stops when the queue is empty or the next event is due at or after
        the horizon. The clock only moves to times of dispatched events.

        Returns:
            Number of events dispatched.
        """
        dispatched = len(self.history)
        while self.env.peek() < horizon:
            self.env.step()
        n = len(self.history) - dispatched
        next_time = self.next_time
        self.debug(
            f"Stopped after {n} events, next event at "
            f"{'never' if math.isinf(next_time) else f'{next_time:.2f}'}"
        )
        return n

    def _dispatch(self, timeout: simpy.events.Timeout):
        event = timeout.value
        self.pending -= 1
        self.history.append(event)
        self.handlers[event.kind](event)
