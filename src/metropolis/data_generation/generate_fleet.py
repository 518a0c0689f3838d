"""
Fleet Generator
===============

Initial taxi positions: each taxi starts, with probability 1/2, on a
random node of the main city, otherwise on a random node of a random
suburb. All taxis are available from time 0.
"""

from typing import List

from .generate_demands import ZoneSampler
from ..utils.instance_def import Taxi



def generate_taxis(sampler: ZoneSampler, n_taxis: int) -> List[Taxi]:
    taxis: List[Taxi] = []
    for k in range(1, n_taxis + 1):
        in_city = sampler.n_sub == 0 or int(sampler.rng.integers(1, 3)) == 1
        if in_city:
            loc = sampler.city_node()
        else:
            loc = sampler.suburb_node()
        taxis.append(Taxi(k, loc, 0.0))
    return taxis
