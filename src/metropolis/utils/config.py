"""
Configuration
=============

Default constants of the metropolis generator and small helpers for
scripts:
- DEFAULT_COST_CFG : rates used by the cost model
- make_rng         : build the random source injected everywhere
- configure_logging: basic console logging for experiment scripts
"""

import logging

import numpy as np


DEFAULT_COST_CFG = {
    "drive_cost": 30.0,          # cost for a taxi to drive for an hour
    "wait_cost": 10.0,           # cost for a taxi to wait for an hour
    "time_step_seconds": 30.0,   # length of one time step
    "hour_fare": 150.0,          # fare for an hour of drive (flat over the day)
}


def make_rng(seed: int) -> np.random.Generator:
    """
    Build the random source that is passed to every build / generate call.
    """
    if seed is None:
        raise ValueError(
            "seed=None is not allowed. "
        )
    return np.random.default_rng(seed)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
