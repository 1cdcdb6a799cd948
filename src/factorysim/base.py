"""Base class that all simulation objects inherit from."""


import logging
import uuid
from typing import Any, Dict

import arrow
import numpy as np
import pandas as pd
import simpy

logger = logging.getLogger(__name__)


class Base:
    def __init__(
        self,
        env: simpy.Environment,
        name: str | None = None,
        uid: str | None = None,
    ) -> None:
        """Base class for all simulation objects.

        Args:
            env: Simpy environment owned by a simulation.
            name (optional): Name of the object. Defaults to "Unknown".
            uid (optional): Unique ID of the object. Defaults to
                "<name>-<random-uuid>".
        """
        self.env = env
        self.name = name or "Unknown"
        self.uid = uid or f"{self.name}-{uuid.uuid4().hex[:8]}"

    def __repr__(self):
        return self.uid

    @property
    def now(self) -> float:
        """Current simulation time in time units (hours)."""
        return self.env.now

    @property
    def data(self) -> Dict[Any, list]:
        """Collected data as a dictionary."""
        if hasattr(self.env, "data"):
            return self.env.data
        else:
            raise ValueError("'data' does not exist in self.env")

    @property
    def data_df(self) -> pd.DataFrame:
        """Collected data as pandas DataFrame."""
        flatten = [
            (*dkey, *dvalue)
            for dkey, dvalues in self.data.items()
            for dvalue in dvalues
        ]
        columns = ["dtype", "obj", "key", "ts", "value"]
        return pd.DataFrame(flatten, columns=columns)

    def append_data(self, dtype: str, key: str, value: Any):
        """Add data into data collection."""
        dkey = (dtype, self.uid, key)
        dvalue = (self.now, value)
        if self.monitor < 0:
            self.data[dkey].append(dvalue)
        elif self.monitor == 1:
            self.data[dkey] = [dvalue]
        elif self.monitor > 1:
            n = self.monitor - 1
            self.data[dkey] = self.data[dkey][-n:] + [dvalue]

    def debug(self, message):
        """Log at DEBUG level."""
        self.log(message, level="debug")

    def info(self, message):
        """Log at INFO level."""
        self.log(message, level="info")

    def warning(self, message):
        """Log at WARNING level."""
        self.log(message, level="warning")

    def log(self, message, level="info"):
        """Log at default level."""
        if not logger.isEnabledFor(logging.getLevelName(level.upper())):
            return
        ts = self.now_dt.format("YYYY-MM-DD HH:mm:ss")
        getattr(logger, level)(
            f"{ts} (t={self.now:.2f}) - {self.name} - {message}"
        )

    @property
    def now_dt(self) -> arrow.Arrow:
        """Current simulation time as a datetime, one time unit = one hour."""
        start = getattr(self.env, "start", None) or arrow.get(0)
        return start.shift(hours=self.now)

    @property
    def randomize(self) -> bool:
        """Whether simulation is non-deterministic."""
        if hasattr(self.env, "randomize"):
            return bool(self.env.randomize)
        else:
            return False  # Default

    @property
    def monitor(self) -> int:
        """Maximum number of latest data values to be collected per key.

        -1: All data is collected
         0: No data is collected
        >1: Number of values to be collected
        """
        if hasattr(self.env, "monitor"):
            return self.env.monitor
        else:
            return 0  # Default

    @property
    def rng(self) -> np.random.Generator:
        """Random generator of the owning simulation."""
        if not hasattr(self.env, "rng"):
            self.env.rng = np.random.default_rng()
        return self.env.rng

    # Randomized functions begin here
    def expo(self, rate: float) -> float:
        """Random number from exponential distribution with given rate."""
        if rate <= 0:
            raise ValueError(f"Rate must be positive, got {rate}")
        if self.randomize:
            return float(self.rng.exponential(1.0 / rate))
        else:
            return 1.0 / rate
