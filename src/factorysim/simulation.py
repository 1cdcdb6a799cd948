"""Simulation is the main interface towards the end-user."""


import time
from collections import defaultdict
from typing import Dict, List, Mapping, Sequence, TypeVar

import arrow
import numpy as np
import simpy

from factorysim.admission import AdmissionPolicy
from factorysim.arrivals import ArrivalGenerator
from factorysim.base import Base
from factorysim.errors import ConfigError
from factorysim.events import Event, EventKind, EventQueue
from factorysim.exporters import get_exporter_by_type
from factorysim.maintenance import Maintenance
from factorysim.parser import (
    DEFAULT_ARRIVALS,
    DEFAULT_CAPACITIES,
    DEFAULT_PRODUCT_TYPES,
    DEFAULT_STAGE_NAMES,
    DEFAULT_STAGE_RESOURCES,
    make_admission,
    make_product_types,
    parse_config,
    validate,
)
from factorysim.pipeline import StagePipeline
from factorysim.resources import ResourcePool
from factorysim.shifts import ShiftController
from factorysim.statistics import Statistics

SimulationType = TypeVar("SimulationType", bound="Simulation")


class Simulation(Base):
    def __init__(
        self,
        capacities: Mapping[str, int] | None = None,
        product_types: Mapping | None = None,
        stage_names: Sequence[str] | None = None,
        stage_resources: Mapping[str, str] | None = None,
        arrivals: Mapping[str, float] | None = None,
        shift_length: float | None = 8.0,
        horizon: float = 1000.0,
        seed: int | None = None,
        randomize: bool = True,
        admission: str | Mapping | AdmissionPolicy | None = "drop",
        repair_duration: float = 5.0,
        monitor: int = 100,
        start: str | None = None,
        report_path: str | None = "simulation_log.txt",
        name: str = "factory",
        uid: str | None = None,
    ) -> None:
        """Discrete-event simulation of a small factory.

        Raw material arrives, passes through the stages of its product type
        and leaves as a finished product. One instance owns all state of a
        run: environment, random generator, resource pool and statistics.

        Args:
            capacities (optional): Mapping of resource class -> units.
                Defaults to {"machines": 10, "operators": 5}.
            product_types (optional): Mapping of product type name ->
                {"durations": [...], "setup": float} or ProductType. Defaults
                to ProductA and ProductB.
            stage_names (optional): Stage sequence that product durations are
                matched against. Defaults to machining, assembly,
                quality_control and packaging.
            stage_resources (optional): Mapping of stage name -> resource
                class it consumes. Defaults to machining and packaging on
                "machines", assembly and quality_control on "operators".
            arrivals (optional): Mapping of product type -> arrival rate.
                Pass an empty mapping to only use `schedule_arrival`.
                Defaults to {"ProductA": 1.0}.
            shift_length (optional): Time between shift changes, None
                disables shift changes. Defaults to 8.0.
            horizon (optional): Default run horizon. Defaults to 1000.0.
            seed (optional): Random seed. Defaults to wall-clock seconds,
                which is logged so the run can be repeated.
            randomize (optional): Whether arrival times are random or fixed
                at their mean. Defaults to True.
            admission (optional): Admission policy for rejected products,
                "drop", "retry", {"type": "retry", "delay": ...} or an
                AdmissionPolicy. Defaults to "drop".
            repair_duration (optional): Time to repair a broken down unit.
                Defaults to 5.0.
            monitor (optional): Number of most recent data points to keep
                per monitored variable, -1 for all. Defaults to 100.
            start (optional): Datetime of simulation time 0 used in logs.
                Defaults to current time.
            report_path (optional): File the text report is written to after
                every run, None disables it. Defaults to "simulation_log.txt".
            name (optional): Name of the simulation. Defaults to "factory".
            uid (optional): Unique ID of the object. Defaults to None.

        Example:

            sim = Simulation.from_config("config/factory.yml")
            sim.run()

        Raises:
            ConfigError: If the configuration references unknown product
                types, stages or resource classes.
        """
        self.seed = int(time.time()) if seed is None else seed
        env = self.init_env(
            simpy.Environment(),
            seed=self.seed,
            randomize=randomize,
            monitor=monitor,
            start=start,
        )
        super().__init__(env, name=name, uid=uid)

        capacities = dict(
            DEFAULT_CAPACITIES if capacities is None else capacities
        )
        stage_names = list(stage_names or DEFAULT_STAGE_NAMES)
        stage_resources = dict(
            DEFAULT_STAGE_RESOURCES if stage_resources is None
            else stage_resources
        )
        arrivals = dict(DEFAULT_ARRIVALS if arrivals is None else arrivals)
        self.product_types = make_product_types(
            DEFAULT_PRODUCT_TYPES if product_types is None else product_types,
            stage_names,
        )
        validate(capacities, self.product_types, stage_resources, arrivals)
        if horizon <= 0:
            raise ConfigError(f"horizon must be positive, got {horizon}")
        self.horizon = horizon
        self.report_path = report_path

        # Components
        self.queue = EventQueue(env, uid=f"{self.uid}-queue")
        self.pool = ResourcePool(env, capacities, uid=f"{self.uid}-pool")
        self.statistics = Statistics(capacities, self.product_types)
        self.pipeline = StagePipeline(
            env,
            self.queue,
            self.pool,
            self.statistics,
            self.product_types,
            stage_resources,
            admission=make_admission(admission),
            uid=f"{self.uid}-pipeline",
        )
        self.arrivals = ArrivalGenerator(
            env, self.queue, self.pipeline, arrivals,
            uid=f"{self.uid}-arrivals",
        )
        try:
            self.maintenance = Maintenance(
                env, self.queue, self.pool, repair_duration=repair_duration,
                uid=f"{self.uid}-maintenance",
            )
            self.shifts = (
                ShiftController(
                    env, self.queue, self.pool, shift_length=shift_length,
                    uid=f"{self.uid}-shifts",
                )
                if shift_length
                else None
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e

        # Handler table
        for kind, handler in self.handlers.items():
            self.queue.register(kind, handler)

        self.info(f"Initialized with seed {self.seed}")
        self.arrivals.start()
        if self.shifts is not None:
            self.shifts.start()

    @property
    def handlers(self):
        """Mapping of event kind -> handler."""
        handlers = {
            EventKind.ARRIVAL: self.arrivals.on_arrival,
            EventKind.SETUP_COMPLETE: self.pipeline.on_setup_complete,
            EventKind.PROCESSING_COMPLETE:
                self.pipeline.on_processing_complete,
            EventKind.STAGE_RETRY: self.pipeline.on_retry,
            EventKind.BREAKDOWN: self.maintenance.on_breakdown,
            EventKind.MAINTENANCE_COMPLETE:
                self.maintenance.on_maintenance_complete,
        }
        if self.shifts is not None:
            handlers[EventKind.SHIFT_CHANGE] = self.shifts.on_shift_change
        return handlers

    @staticmethod
    def init_env(
        env: simpy.Environment,
        seed: int,
        randomize: bool = True,
        monitor: int = 100,
        start: str | None = None,
    ) -> simpy.Environment:
        """Initialize environment object."""
        env.data = defaultdict(lambda: [])
        env.rng = np.random.default_rng(seed)
        env.randomize = randomize
        env.monitor = monitor
        env.start = arrow.get(start) if start is not None else arrow.utcnow()
        return env

    @classmethod
    def from_config(cls, path: str, **kwargs) -> SimulationType:
        """Create Simulation object from configuration file (yaml).

        Args:
            path: Filepath into factory configuration YAML-file.
            **kwargs: Overrides for values in the file.

        Returns:
            Simulation object based on given configuration file.
        """
        cfg = parse_config(path)
        cfg.update(kwargs)
        return cls(**cfg)

    @property
    def history(self) -> List[Event]:
        """Dispatched events in dispatch order."""
        return self.queue.history

    @property
    def capacities(self) -> Dict[str, int]:
        return dict(self.pool.capacity)

    @property
    def available(self) -> Dict[str, int]:
        return dict(self.pool.available)

    def schedule_arrival(self, product_type: str, at: float | None = None):
        """Inject a single raw material arrival, by default right now."""
        if product_type not in self.product_types:
            raise ConfigError(f"Unknown product type '{product_type}'")
        at = self.now if at is None else at
        return self.arrivals.schedule_once(product_type, at)

    def trigger_breakdown(self, resource_class: str, at: float | None = None):
        """Break down one unit of `resource_class` at given time."""
        if resource_class not in self.pool:
            raise ConfigError(f"Unknown resource class '{resource_class}'")
        return self.maintenance.trigger_breakdown(resource_class, at=at)

    def run(
        self, horizon: float | None = None, report_path: str | None = None
    ) -> Statistics:
        """Run simulation until the horizon or until no events are left.

        Args:
            horizon (optional): Simulation time to stop at. Events due at or
                after it are not dispatched. Defaults to `self.horizon`.
            report_path (optional): Write the text report here instead of
                `self.report_path`. Defaults to None.

        Returns:
            Collected statistics.

        Raises:
            ReportError: If the report cannot be written.
        """
        horizon = self.horizon if horizon is None else horizon
        self.info(f"Running until {horizon}")
        self.queue.run_until(horizon)

        s = self.statistics
        self.info(
            f"Finished {s.finished_count} of {s.raw_material_count} products, "
            f"dropped {s.dropped_count}"
        )
        report_path = report_path or self.report_path
        if report_path is not None:
            self.export(report_path)
        return s

    def export(self, filepath: str, exporter: str = "text"):
        """Export results with the exporter of given type."""
        cls = get_exporter_by_type(exporter)
        cls(filepath).export(self)

    def utilization(self, horizon: float | None = None) -> Dict[str, float]:
        horizon = self.now if horizon is None else horizon
        return self.statistics.utilization(self.pool.capacity, horizon)
