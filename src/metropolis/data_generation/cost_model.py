"""
Cost Model
==========

Rates used to price roads and trips on a metropolis network.

Travel times are expressed in time steps; a step lasts
`time_step_seconds` seconds. The monetary cost of driving for `time` steps is:
    cost = time * drive_cost * time_step_seconds / 3600

The same model also samples the travel time of a road:
    - short hop (roads inside a grid, suburb ring): [1, 4] steps
    - long hop  (suburb <-> main city anchor):      [5, 15] steps
integer-valued in discrete mode, real-valued otherwise.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import numpy as np

from ..utils.config import DEFAULT_COST_CFG
from ..utils.errors import InvalidParameterError


SHORT_HOP = (1, 4)
LONG_HOP = (5, 15)


@dataclass(frozen=True)
class CostModel:
    drive_cost: float = DEFAULT_COST_CFG["drive_cost"]
    wait_cost: float = DEFAULT_COST_CFG["wait_cost"]
    time_step_seconds: float = DEFAULT_COST_CFG["time_step_seconds"]
    fare_per_hour: float = DEFAULT_COST_CFG["hour_fare"]
    fare_fn: Optional[Callable[[datetime], float]] = None   # overrides the flat fare

    def __post_init__(self):
        if not self.time_step_seconds > 0:
            raise InvalidParameterError(
                f"time_step_seconds must be positive, got {self.time_step_seconds}"
            )
        for name in ("drive_cost", "wait_cost", "fare_per_hour"):
            if not getattr(self, name) >= 0:
                raise InvalidParameterError(f"{name} must be non-negative, got {getattr(self, name)}")

    def hour_fare(self, t: datetime) -> float:
        """Fare for an hour of drive at wall-clock time t."""
        if self.fare_fn is None:
            return float(self.fare_per_hour)
        fare = float(self.fare_fn(t))
        if not fare >= 0:
            raise InvalidParameterError(f"hour fare at {t} must be non-negative, got {fare}")
        return fare

    def travel_cost(self, time: float) -> float:
        return time * self.drive_cost * self.time_step_seconds / 3600

    @property
    def waiting_cost(self) -> float:
        """Cost for a taxi to wait for one time step."""
        return self.wait_cost * self.time_step_seconds / 3600

    def short_hop_time(self, rng: np.random.Generator, discrete: bool) -> float:
        return _sample_hop(rng, SHORT_HOP, discrete)

    def long_hop_time(self, rng: np.random.Generator, discrete: bool) -> float:
        return _sample_hop(rng, LONG_HOP, discrete)


def _sample_hop(rng: np.random.Generator, bounds, discrete: bool) -> float:
    low, high = bounds
    if discrete:
        return float(rng.integers(low, high + 1))
    return low + (high - low) * rng.random()


def cost_model_from_cfg(cfg: dict | None = None) -> CostModel:
    """
    Build a CostModel from a config dictionary.

    Expected keys in cfg (all optional, see DEFAULT_COST_CFG):
    ----------------------------------------------------------
    drive_cost        : cost per hour of drive
    wait_cost         : cost per hour of wait
    time_step_seconds : seconds in one time step
    hour_fare         : flat fare per hour, or a callable t -> fare
    """
    if cfg is None:
        cfg = {}

    fare = cfg.get("hour_fare", DEFAULT_COST_CFG["hour_fare"])
    if callable(fare):
        fare_per_hour, fare_fn = DEFAULT_COST_CFG["hour_fare"], fare
    else:
        fare_per_hour, fare_fn = float(fare), None

    return CostModel(
        drive_cost=float(cfg.get("drive_cost", DEFAULT_COST_CFG["drive_cost"])),
        wait_cost=float(cfg.get("wait_cost", DEFAULT_COST_CFG["wait_cost"])),
        time_step_seconds=float(cfg.get("time_step_seconds", DEFAULT_COST_CFG["time_step_seconds"])),
        fare_per_hour=fare_per_hour,
        fare_fn=fare_fn,
    )
