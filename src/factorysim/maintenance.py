"""Resource breakdowns and maintenance."""


import simpy

from factorysim.base import Base
from factorysim.events import Event, EventKind, EventQueue
from factorysim.resources import ResourcePool


class Maintenance(Base):
    def __init__(
        self,
        env: simpy.Environment,
        queue: EventQueue,
        pool: ResourcePool,
        repair_duration: float = 5.0,
        name: str = "maintenance",
        uid: str | None = None,
    ):
        """Maintenance service.

        Nothing triggers breakdowns on its own. They are injected with
        `trigger_breakdown`, e.g. from a test or a fault-injection script.

        Args:
            env: Simpy environment.
            queue: Event queue.
            pool: Resource pool whose units break down.
            repair_duration (optional): Time from breakdown until the unit
                is back in service. Defaults to 5.0.
            name (optional): Name of the service. Defaults to "maintenance".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        if repair_duration < 0:
            raise ValueError(
                f"repair_duration must be >= 0, got {repair_duration}"
            )
        self.queue = queue
        self.pool = pool
        self.repair_duration = repair_duration
        self.breakdowns = 0
        self.repairs = 0

    def trigger_breakdown(self, resource_class: str, at: float | None = None):
        """Schedule a breakdown of one unit of `resource_class`."""
        at = self.now if at is None else at
        return self.queue.schedule(
            at, EventKind.BREAKDOWN, resource_class=resource_class
        )

    def on_breakdown(self, event: Event):
        resource_class = event.payload["resource_class"]
        lease = self.pool.try_acquire(resource_class)
        if lease is None:
            self.warning(
                f"Breakdown on {resource_class} but no idle unit to take down"
            )
            return

        self.breakdowns += 1
        self.info(f"Breakdown occurred on {resource_class}")
        self.queue.schedule(
            self.now + self.repair_duration,
            EventKind.MAINTENANCE_COMPLETE,
            lease=lease,
        )

    def on_maintenance_complete(self, event: Event):
        lease = event.payload["lease"]
        self.repairs += 1
        self.info(f"Maintenance completed on {lease.resource_class}")
        self.pool.release(lease)
