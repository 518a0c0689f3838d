"""
Metropolis
==========

Synthetic taxi problems on a city made of a square main grid and square
suburbs linked around it.
"""

from .data_generation.cost_model import CostModel, cost_model_from_cfg
from .utils.config import make_rng
from .utils.errors import (
    DegenerateZoneError,
    HorizonTooSmallError,
    InvalidParameterError,
    MetropolisError,
)
from .utils.instance import Metropolis, MetropolisNetwork
from .utils.instance_def import Customer, Taxi

__all__ = [
    "CostModel",
    "Customer",
    "DegenerateZoneError",
    "HorizonTooSmallError",
    "InvalidParameterError",
    "Metropolis",
    "MetropolisError",
    "MetropolisNetwork",
    "Taxi",
    "cost_model_from_cfg",
    "make_rng",
]
