"""
Shortest Paths
==============

All-pairs shortest travel times of a network, with the cost of driving
along each fastest path.

Any oracle builder can be used by the problem container as long as it
follows the same contract:
    builder(G, road_time, road_cost) -> oracle
    oracle.query(origin, dest)       -> (time, cost)
    oracle.traveltime(origin, dest)  -> time
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

import networkx as nx
import numpy as np


logger = logging.getLogger(__name__)

Arc = Tuple[int, int]


class ShortestPaths:
    """
    Dense matrices of shortest travel time / cost, indexed by location id
    (row and column 0 are unused, ids start at 1).
    """

    def __init__(self, times: np.ndarray, costs: np.ndarray):
        self.times = times
        self.costs = costs

    @property
    def num_nodes(self) -> int:
        return self.times.shape[0] - 1

    def query(self, origin: int, dest: int) -> Tuple[float, float]:
        return float(self.times[origin, dest]), float(self.costs[origin, dest])

    def traveltime(self, origin: int, dest: int) -> float:
        return float(self.times[origin, dest])

    def travelcost(self, origin: int, dest: int) -> float:
        return float(self.costs[origin, dest])

    def travel_times(self) -> np.ndarray:
        return self.times


def shortest_paths(
    G: nx.DiGraph,
    road_time: Dict[Arc, float],
    road_cost: Dict[Arc, float],
) -> ShortestPaths:
    """
    Compute shortest paths from everywhere to everywhere, weighted by
    travel time; the cost of a pair is the sum of road costs along its
    fastest path. Unreachable pairs are left at +inf.
    """
    n = G.number_of_nodes()
    times = np.full((n + 1, n + 1), np.inf)
    costs = np.full((n + 1, n + 1), np.inf)

    def weight(u, v, _attrs):
        return road_time[(u, v)]

    for source, (dist, paths) in nx.all_pairs_dijkstra(G, weight=weight):
        for target, path in paths.items():
            times[source, target] = dist[target]
            costs[source, target] = sum(road_cost[(a, b)] for a, b in zip(path[:-1], path[1:]))

    logger.debug("Shortest paths computed for %d nodes", n)
    return ShortestPaths(times, costs)
