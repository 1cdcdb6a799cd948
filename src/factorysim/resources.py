"""Finite pools of interchangeable resource units."""


from dataclasses import dataclass
from typing import Dict

import simpy

from factorysim.base import Base
from factorysim.errors import ResourceError


@dataclass(frozen=True)
class Lease:
    """One acquired unit of a resource class."""

    resource_class: str
    epoch: int


class ResourcePool(Base):
    def __init__(
        self,
        env: simpy.Environment,
        capacities: Dict[str, int],
        name: str = "resource-pool",
        uid: str | None = None,
    ):
        """Capacity and availability per resource class.

        A shift reset (`reset_to_full`) restores every class to capacity
        without reconciling units that are still held. Units held across a
        reset belong to an old epoch, and releasing them afterwards does not
        add availability.

        Args:
            env: Simpy environment.
            capacities: Mapping of resource class -> number of units.
            name (optional): Name of the pool. Defaults to "resource-pool".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        for resource_class, capacity in capacities.items():
            if capacity < 0:
                raise ResourceError(
                    f"Capacity of '{resource_class}' must be >= 0, "
                    f"got {capacity}"
                )
        self.capacity = dict(capacities)
        self.available = dict(capacities)
        self.epoch = 0

    def __contains__(self, resource_class):
        return resource_class in self.capacity

    def _check(self, resource_class):
        if resource_class not in self.capacity:
            raise ResourceError(f"Unknown resource class '{resource_class}'")

    def _record(self, resource_class):
        self.append_data("numerical", f"{resource_class}_available",
                         self.available[resource_class])

    def try_acquire(self, resource_class: str) -> Lease | None:
        """Take one unit if any is available.

        Returns:
            Lease for the unit or None when the class is exhausted.
        """
        self._check(resource_class)
        if self.available[resource_class] <= 0:
            return None

        self.available[resource_class] -= 1
        self._record(resource_class)
        return Lease(resource_class, self.epoch)

    def release(self, lease: Lease) -> bool:
        """Return a unit to its pool.

        Returns:
            True if availability was restored, False for a lease abandoned
            by an earlier reset.

        Raises:
            ResourceError: If the release would exceed capacity.
        """
        resource_class = lease.resource_class
        self._check(resource_class)
        if lease.epoch != self.epoch:
            self.debug(
                f"Ignored release of '{resource_class}' held since "
                f"epoch {lease.epoch}"
            )
            return False

        if self.available[resource_class] >= self.capacity[resource_class]:
            raise ResourceError(
                f"Released '{resource_class}' beyond capacity "
                f"{self.capacity[resource_class]}"
            )
        self.available[resource_class] += 1
        self._record(resource_class)
        return True

    def reset_to_full(self):
        """Set every class back to full capacity and start a new epoch."""
        self.epoch += 1
        for resource_class, capacity in self.capacity.items():
            self.available[resource_class] = capacity
            self._record(resource_class)

    def in_use(self, resource_class: str) -> int:
        self._check(resource_class)
        return self.capacity[resource_class] - self.available[resource_class]
