"""Statistics collected as a byproduct of event handling."""


from collections import defaultdict
from typing import Dict, Iterable

import pandas as pd


class Statistics:
    def __init__(
        self, resource_classes: Iterable[str], product_types: Iterable[str]
    ):
        """Resource usage, waiting time and throughput accumulators.

        All values only ever grow during a run. They are meant to be read
        once the run is over.

        Args:
            resource_classes: Resource classes to report, even if unused.
            product_types: Product types to report, even if never finished.
        """
        self.usage_time: Dict[str, float] = {c: 0.0 for c in resource_classes}
        self.waiting_time: Dict[str, float] = {
            c: 0.0 for c in self.usage_time
        }
        self.finished_count = 0
        self.finished_by_type: Dict[str, int] = {t: 0 for t in product_types}
        self.raw_material_count = 0
        self.dropped_count = 0
        self.dropped_by_stage: Dict[str, int] = defaultdict(int)

    def add_usage(self, resource_class: str, duration: float):
        self.usage_time[resource_class] = (
            self.usage_time.get(resource_class, 0.0) + duration
        )

    def add_waiting(self, resource_class: str, duration: float):
        self.waiting_time[resource_class] = (
            self.waiting_time.get(resource_class, 0.0) + duration
        )

    def add_arrival(self):
        self.raw_material_count += 1

    def add_finished(self, product_type: str):
        self.finished_count += 1
        self.finished_by_type[product_type] = (
            self.finished_by_type.get(product_type, 0) + 1
        )

    def add_dropped(self, stage_name: str):
        self.dropped_count += 1
        self.dropped_by_stage[stage_name] += 1

    def utilization(self, capacities: Dict[str, int], horizon: float):
        """Share of available unit-time spent in use per resource class."""
        out = {}
        for resource_class, usage in self.usage_time.items():
            total = capacities.get(resource_class, 0) * horizon
            out[resource_class] = usage / total if total > 0 else 0.0
        return out

    def to_frame(self) -> pd.DataFrame:
        """Per resource class totals as a pandas DataFrame."""
        df = pd.DataFrame(
            {
                "usage_time": pd.Series(self.usage_time, dtype=float),
                "waiting_time": pd.Series(self.waiting_time, dtype=float),
            }
        )
        df.index.name = "resource_class"
        return df.fillna(0.0)

    def summary(self) -> Dict[str, int]:
        return {
            "raw_materials": self.raw_material_count,
            "finished": self.finished_count,
            "dropped": self.dropped_count,
            **{f"finished.{k}": v for k, v in self.finished_by_type.items()},
        }
