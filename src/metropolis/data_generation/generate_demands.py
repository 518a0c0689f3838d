"""
Demand Generator
================

Generates the customers (trip requests) of a METROPOLIS problem.

Demand model (constant over the day):
    mean_per_hour = (2 * width^2 + 0.5 * n_sub * sub_width^2) * demand
    category probabilities:
        city   => city     0.40
        suburb => suburb   0.10
        city   => suburb   0.25
        suburb => city     0.25
Without suburbs every trip is city => city.

Two generation modes:
1. DISCRETE: for every time step t = 0..n_time the number of new
   customers is Poisson(mean_per_hour * step / 3600).
2. CONTINUOUS: customers arrive one at a time, separated by exponential
   gaps of mean 3600 * 1000 / mean_per_hour milliseconds.

Each customer gets:
    - origin / destination sampled uniformly in the zones of its category,
    - price proportional to the shortest travel time between them,
    - a pick-up window [earliest, latest] starting at its arrival time,
    - a call time before its earliest pick-up.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Tuple

import numpy as np

from .cost_model import CostModel
from .generate_network import coord_to_loc, sub_width_of
from ..utils.errors import DegenerateZoneError
from ..utils.instance_def import Customer


logger = logging.getLogger(__name__)

CITY_CITY, SUB_SUB, CITY_SUB, SUB_CITY = 0, 1, 2, 3
CATEGORY_PROBS = [0.40, 0.10, 0.25, 0.25]

MAX_PICKUP_SLACK = 10     # steps between earliest and latest pick-up
MAX_CALL_ADVANCE = 120    # steps between call and earliest pick-up
FARE_STEPS_PER_HOUR = 120  # continuous price = hour_fare / 120 per step of travel



def metro_demand(width: int, n_sub: int, demand: float) -> Tuple[float, List[float]]:
    """
    Demand at a given time: (mean customers per hour, category probabilities).
    """
    sub_width = sub_width_of(width)
    mean_per_hour = (2 * width ** 2 + 0.5 * n_sub * sub_width ** 2) * demand
    if n_sub == 0:
        return mean_per_hour, [1.0, 0.0, 0.0, 0.0]
    return mean_per_hour, list(CATEGORY_PROBS)


class ZoneSampler:
    """Uniform sampling of locations in the main city or in the suburbs."""

    def __init__(self, width: int, n_sub: int, rng: np.random.Generator):
        self.width = width
        self.sub_width = sub_width_of(width)
        self.n_sub = n_sub
        self.rng = rng

    def city_node(self) -> int:
        i, j = self.rng.integers(1, self.width + 1, size=2)
        return coord_to_loc(int(i), int(j), 0, self.width)

    def suburb_node(self) -> int:
        i, j = self.rng.integers(1, self.sub_width + 1, size=2)
        sub = int(self.rng.integers(1, self.n_sub + 1))
        return coord_to_loc(int(i), int(j), sub, self.width)

    def trip(self, category: int) -> Tuple[int, int]:
        """(origin, destination) for a trip category."""
        if category == CITY_CITY:
            return self._same_zone_trip(self.city_node, self.width ** 2, "main city")
        if category == SUB_SUB:
            return self._same_zone_trip(self.suburb_node, self.n_sub * self.sub_width ** 2, "suburbs")
        if category == CITY_SUB:
            return self.city_node(), self.suburb_node()
        return self.suburb_node(), self.city_node()

    def _same_zone_trip(self, draw, zone_size: int, zone_name: str) -> Tuple[int, int]:
        if zone_size < 2:
            raise DegenerateZoneError(
                f"Cannot draw a trip inside the {zone_name}: only {zone_size} location(s)"
            )
        orig = draw()
        dest = draw()
        while orig == dest:
            dest = draw()
        return orig, dest


def _sample_category(rng: np.random.Generator, probs: List[float]) -> int:
    return int(rng.choice(len(probs), p=probs))



#####################
# DISCRETE CUSTOMERS:
#####################
def generate_customers_discrete(
    sampler: ZoneSampler,
    paths,
    cost_model: CostModel,
    demand: float,
    t_start: datetime,
    n_time: int,
) -> List[Customer]:
    """
    Poisson arrivals at every integer time step 0..n_time.
    """
    rng = sampler.rng
    step = cost_model.time_step_seconds
    custs: List[Customer] = []
    t_current = t_start

    for t in range(0, int(n_time) + 1):
        mean_per_hour, cat_probs = metro_demand(sampler.width, sampler.n_sub, demand)
        n_custs = int(rng.poisson(mean_per_hour * step / 3600))

        for _ in range(n_custs):
            orig, dest = sampler.trip(_sample_category(rng, cat_probs))

            price = (cost_model.hour_fare(t_current) * step / 3600) * round(paths.traveltime(orig, dest))
            t_min = t
            t_max = min(n_time, t + int(rng.integers(1, MAX_PICKUP_SLACK + 1)))
            t_call = max(0, t_min - int(rng.integers(1, MAX_CALL_ADVANCE + 1)))
            custs.append(Customer(len(custs) + 1, orig, dest,
                                  float(t_call), float(t_min), float(t_max), float(price)))

        t_current += timedelta(seconds=step)

    return custs



#######################
# CONTINUOUS CUSTOMERS:
#######################
def generate_customers_continuous(
    sampler: ZoneSampler,
    paths,
    cost_model: CostModel,
    demand: float,
    t_start: datetime,
    t_end: datetime,
    n_time: float,
) -> List[Customer]:
    """
    One customer per arrival, exponential inter-arrival gaps (milliseconds)
    until the clock reaches t_end.
    """
    rng = sampler.rng
    step = cost_model.time_step_seconds
    custs: List[Customer] = []
    t_current = t_start
    t = 0.0

    while t_current < t_end:
        mean_per_hour, cat_probs = metro_demand(sampler.width, sampler.n_sub, demand)
        orig, dest = sampler.trip(_sample_category(rng, cat_probs))

        price = (cost_model.hour_fare(t_current) / FARE_STEPS_PER_HOUR) * paths.traveltime(orig, dest)
        t_min = t
        t_max = min(n_time, t + MAX_PICKUP_SLACK * rng.random())
        t_call = max(0.0, t_min - MAX_CALL_ADVANCE * rng.random())
        custs.append(Customer(len(custs) + 1, orig, dest,
                              float(t_call), float(t_min), float(t_max), float(price)))

        gap_ms = int(round(rng.exponential(3600 * 1000 / mean_per_hour)))
        t_current += timedelta(milliseconds=gap_ms)
        t = (t_current - t_start) / timedelta(milliseconds=1) / (1000 * step)

    return custs
