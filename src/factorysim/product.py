"""Product types and products travelling through the pipeline."""


from dataclasses import dataclass, replace
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Stage:
    name: str
    duration: float


@dataclass(frozen=True)
class ProductType:
    """Static recipe of a product: ordered stages and first-stage setup."""

    name: str
    stages: Tuple[Stage, ...]
    setup_duration: float = 0.0

    @classmethod
    def from_durations(
        cls,
        name: str,
        durations: Sequence[float],
        stage_names: Sequence[str],
        setup_duration: float = 0.0,
    ) -> "ProductType":
        """Pair processing durations positionally with stage names."""
        if len(durations) > len(stage_names):
            raise ValueError(
                f"Product type '{name}' has {len(durations)} stages but only "
                f"{len(stage_names)} stage names are defined"
            )
        stages = tuple(
            Stage(stage_name, float(duration))
            for stage_name, duration in zip(stage_names, durations)
        )
        return cls(name, stages, float(setup_duration))

    @property
    def stage_count(self) -> int:
        return len(self.stages)

    @property
    def lead_time(self) -> float:
        """Uncontested time from arrival to finish."""
        return self.setup_duration + sum(s.duration for s in self.stages)


@dataclass(frozen=True)
class Product:
    """Product passed by value between events."""

    product_type: str
    stage_index: int = 0
    uid: str = ""

    @classmethod
    def create(cls, product_type: str, number: int) -> "Product":
        return cls(product_type, 0, f"{product_type}-{number}")

    def advance(self) -> "Product":
        return replace(self, stage_index=self.stage_index + 1)
