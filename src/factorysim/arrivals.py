"""Raw material arrivals."""


from typing import Dict

import simpy

from factorysim.base import Base
from factorysim.events import Event, EventKind, EventQueue
from factorysim.pipeline import StagePipeline
from factorysim.product import Product


class ArrivalGenerator(Base):
    def __init__(
        self,
        env: simpy.Environment,
        queue: EventQueue,
        pipeline: StagePipeline,
        rates: Dict[str, float],
        name: str = "arrivals",
        uid: str | None = None,
    ):
        """Poisson arrivals of raw material per product type.

        Every arrival schedules the next one, so the chain only ends at the
        run horizon.

        Args:
            env: Simpy environment.
            queue: Event queue.
            pipeline: Pipeline new products enter.
            rates: Mapping of product type -> arrivals per time unit. The
                mean inter-arrival time is 1 / rate.
            name (optional): Defaults to "arrivals".
            uid (optional): Unique ID of the object. Defaults to None.
        """
        super().__init__(env, name=name, uid=uid)
        self.queue = queue
        self.pipeline = pipeline
        self.rates = rates

    def start(self):
        """Schedule the first arrival of every product type."""
        for product_type, rate in self.rates.items():
            self.schedule_next(product_type, rate)

    def schedule_next(self, product_type: str, rate: float):
        self.queue.schedule(
            self.now + self.expo(rate),
            EventKind.ARRIVAL,
            product_type=product_type,
            recurring=True,
        )

    def schedule_once(self, product_type: str, at: float):
        """Inject a single arrival that does not schedule a successor."""
        return self.queue.schedule(
            at, EventKind.ARRIVAL, product_type=product_type, recurring=False
        )

    def on_arrival(self, event: Event):
        product_type = event.payload["product_type"]
        statistics = self.pipeline.statistics
        statistics.add_arrival()
        product = Product.create(product_type, statistics.raw_material_count)
        self.debug(f"Raw material for {product_type} arrived ({product.uid})")

        if event.payload.get("recurring"):
            self.schedule_next(product_type, self.rates[product_type])

        self.pipeline.attempt_stage(product)
