"""Drives products through their processing stages."""


from typing import Dict

import simpy

from factorysim.admission import AdmissionPolicy, DropPolicy
from factorysim.base import Base
from factorysim.events import Event, EventKind, EventQueue
from factorysim.product import Product, ProductType, Stage
from factorysim.resources import Lease, ResourcePool
from factorysim.statistics import Statistics


class StagePipeline(Base):
    def __init__(
        self,
        env: simpy.Environment,
        queue: EventQueue,
        pool: ResourcePool,
        statistics: Statistics,
        product_types: Dict[str, ProductType],
        stage_resources: Dict[str, str],
        admission: AdmissionPolicy | None = None,
        name: str = "pipeline",
        uid: str | None = None,
    ):
        """Stage admission and advancement of products.

        A product holds one unit of its stage's resource class from the
        moment it is admitted until the stage's processing completes. The
        first stage additionally runs the product type's setup before
        processing starts.

        Per product:

            arrived -> awaiting(n) -> setup(n) [n == 0 only] ->
            processing(n) -> awaiting(n + 1) | finished

        Usage time is booked when work is scheduled, not when it ends: the
        setup duration on admission, the processing duration when setup
        completes.

        Args:
            env: Simpy environment.
            queue: Event queue to schedule stage events into.
            pool: Resource pool stages acquire units from.
            statistics: Statistics collector.
            product_types: Mapping of product type name -> ProductType.
            stage_resources: Mapping of stage name -> resource class.
            admission (optional): Policy for products rejected at a stage.
                Defaults to DropPolicy.
            name (optional): Name of the pipeline. Defaults to "pipeline".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        self.queue = queue
        self.pool = pool
        self.statistics = statistics
        self.product_types = product_types
        self.stage_resources = stage_resources
        self.admission = admission or DropPolicy()

    def resource_class(self, stage: Stage) -> str:
        return self.stage_resources[stage.name]

    def attempt_stage(self, product: Product, attempt: int = 0):
        """Try to admit product into its current stage."""
        product_type = self.product_types[product.product_type]
        if product.stage_index >= product_type.stage_count:
            return

        stage = product_type.stages[product.stage_index]
        resource_class = self.resource_class(stage)
        lease = self.pool.try_acquire(resource_class)
        if lease is None:
            self.debug(f"{product.uid} rejected at {stage.name}")
            self.admission.on_rejected(
                self, product, stage, resource_class, attempt
            )
            return

        setup = 0.0
        if product.stage_index == 0:
            setup = product_type.setup_duration
        self.statistics.add_usage(resource_class, setup)
        self.queue.schedule(
            self.now + setup,
            EventKind.SETUP_COMPLETE,
            product=product,
            lease=lease,
        )

    def on_setup_complete(self, event: Event):
        product = event.payload["product"]
        lease = event.payload["lease"]
        stage = self.product_types[product.product_type].stages[
            product.stage_index
        ]
        self.statistics.add_usage(lease.resource_class, stage.duration)
        self.queue.schedule(
            self.now + stage.duration,
            EventKind.PROCESSING_COMPLETE,
            product=product,
            lease=lease,
        )

    def on_processing_complete(self, event: Event):
        self.complete_stage(event.payload["product"], event.payload["lease"])

    def on_retry(self, event: Event):
        self.attempt_stage(event.payload["product"], event.payload["attempt"])

    def complete_stage(self, product: Product, lease: Lease):
        """Release the stage's unit and move product onwards."""
        product_type = self.product_types[product.product_type]
        stage = product_type.stages[product.stage_index]
        self.debug(f"{stage.name} for {product.uid} completed")

        self.pool.release(lease)
        product = product.advance()
        if product.stage_index >= product_type.stage_count:
            self.statistics.add_finished(product.product_type)
            self.debug(f"{product.uid} finished")
        else:
            self.attempt_stage(product)

    def retry(self, product: Product, at: float, attempt: int):
        self.queue.schedule(
            at, EventKind.STAGE_RETRY, product=product, attempt=attempt
        )

    def drop(self, product: Product, stage: Stage):
        self.statistics.add_dropped(stage.name)
        self.debug(f"{product.uid} dropped at {stage.name}")
