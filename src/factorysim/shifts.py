"""Shift changeovers."""


import simpy

from factorysim.base import Base
from factorysim.events import Event, EventKind, EventQueue
from factorysim.resources import ResourcePool


class ShiftController(Base):
    def __init__(
        self,
        env: simpy.Environment,
        queue: EventQueue,
        pool: ResourcePool,
        shift_length: float = 8.0,
        name: str = "shifts",
        uid: str | None = None,
    ):
        """Resets resource availability at every shift change.

        The reset restores full capacity even for units still held by
        products in progress. Those units come back once more when the
        products finish, but the pool ignores their release.

        Args:
            env: Simpy environment.
            queue: Event queue.
            pool: Resource pool to reset.
            shift_length (optional): Time between shift changes. Defaults
                to 8.0.
            name (optional): Defaults to "shifts".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        if shift_length <= 0:
            raise ValueError(
                f"shift_length must be positive, got {shift_length}"
            )
        self.queue = queue
        self.pool = pool
        self.shift_length = shift_length
        self.shift_changes = 0

    def start(self):
        self.queue.schedule(
            self.now + self.shift_length, EventKind.SHIFT_CHANGE
        )

    def on_shift_change(self, event: Event):
        self.shift_changes += 1
        self.info(f"Shift change #{self.shift_changes}")
        self.pool.reset_to_full()
        self.queue.schedule(
            self.now + self.shift_length, EventKind.SHIFT_CHANGE
        )
