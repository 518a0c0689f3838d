"""
Metropolis Instance
===================

Problem container for the taxi simulation on a METROPOLIS city.

Built in two phases:
1) `MetropolisNetwork` : the road network, built once (topology, travel
   times and costs, shortest paths, cost model). Never changed afterwards.
2) `Metropolis`        : a network + the state of one simulation run
   (customers, taxis, time horizon), regenerated in full by
   `generate_problem` for every run.

`Metropolis.copy()` returns an independent deep copy, so several runs can
branch from the same built network.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

import networkx as nx
import numpy as np

from .errors import HorizonTooSmallError, InvalidParameterError
from .instance_def import Customer, Taxi
from .shortest_paths import shortest_paths
from ..data_generation.cost_model import CostModel
from ..data_generation.generate_demands import (
    ZoneSampler,
    generate_customers_continuous,
    generate_customers_discrete,
)
from ..data_generation.generate_fleet import generate_taxis
from ..data_generation.generate_network import (
    coord_to_loc,
    generate_metropolis_network,
    loc_to_coord,
    num_locations,
    sub_width_of,
)


logger = logging.getLogger(__name__)

Node = int
Arc = Tuple[Node, Node]



@dataclass(frozen=True, eq=False)
class MetropolisNetwork:
    ### --- city shape ---
    width: int                      # side of the main city
    sub_width: int                  # side of each suburb (width // 2)
    n_sub: int                      # number of suburbs
    discrete_time: bool             # integer travel times and time steps

    ### --- rates ---
    cost_model: CostModel

    ### --- network ---
    graph: nx.DiGraph
    road_time: Dict[Arc, float]     # travel time of each road (steps)
    road_cost: Dict[Arc, float]     # cost of each road
    paths: object                   # shortest path oracle

    @classmethod
    def build(
        cls,
        width: int,
        n_sub: int,
        rng: np.random.Generator,
        discrete_time: bool = False,
        cost_model: Optional[CostModel] = None,
        paths_builder: Callable = shortest_paths,
    ) -> "MetropolisNetwork":
        """
        Generate the road network and compute its shortest paths.
        """
        if cost_model is None:
            cost_model = CostModel()

        G, road_time, road_cost = generate_metropolis_network(
            width, n_sub, rng, cost_model=cost_model, discrete_time=discrete_time,
        )
        # from everywhere to everywhere
        paths = paths_builder(G, road_time, road_cost)

        return cls(
            width=width,
            sub_width=sub_width_of(width),
            n_sub=n_sub,
            discrete_time=discrete_time,
            cost_model=cost_model,
            graph=G,
            road_time=road_time,
            road_cost=road_cost,
            paths=paths,
        )

    @property
    def num_nodes(self) -> int:
        return num_locations(self.width, self.n_sub)

    @property
    def num_edges(self) -> int:
        return self.graph.number_of_edges()

    def coord_to_loc(self, i: int, j: int, zone: int) -> Node:
        return coord_to_loc(i, j, zone, self.width)

    def loc_to_coord(self, loc: Node) -> Tuple[int, int, int]:
        return loc_to_coord(loc, self.width)

    def copy(self) -> "MetropolisNetwork":
        """Deep copy: no graph, mapping or matrix is shared with self."""
        return MetropolisNetwork(
            width=self.width,
            sub_width=self.sub_width,
            n_sub=self.n_sub,
            discrete_time=self.discrete_time,
            cost_model=self.cost_model,    # frozen
            graph=self.graph.copy(),
            road_time=dict(self.road_time),
            road_cost=dict(self.road_cost),
            paths=copy.deepcopy(self.paths),
        )



class Metropolis:
    """
    A metropolis network together with the customers and taxis of one
    simulation run.
    """

    def __init__(self, network: MetropolisNetwork):
        self.network = network

        # --- run state, replaced by generate_problem ---
        self.custs: List[Customer] = []
        self.taxis: List[Taxi] = []
        self.n_time: float = 0.0
        self.t_start: Optional[datetime] = None
        self.t_end: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        width: int,
        n_sub: int,
        rng: np.random.Generator,
        discrete_time: bool = False,
        cost_model: Optional[CostModel] = None,
        paths_builder: Callable = shortest_paths,
    ) -> "Metropolis":
        return cls(MetropolisNetwork.build(
            width, n_sub, rng,
            discrete_time=discrete_time,
            cost_model=cost_model,
            paths_builder=paths_builder,
        ))

    ### --- network shortcuts ---
    @property
    def graph(self) -> nx.DiGraph:
        return self.network.graph

    @property
    def road_time(self) -> Dict[Arc, float]:
        return self.network.road_time

    @property
    def road_cost(self) -> Dict[Arc, float]:
        return self.network.road_cost

    @property
    def paths(self):
        return self.network.paths

    @property
    def discrete_time(self) -> bool:
        return self.network.discrete_time

    ### --- constants ---
    @property
    def drive_cost(self) -> float:
        return self.network.cost_model.drive_cost

    @property
    def wait_cost(self) -> float:
        return self.network.cost_model.wait_cost

    @property
    def waiting_cost(self) -> float:
        """Cost for a taxi to wait one time step."""
        return self.network.cost_model.waiting_cost

    @property
    def time_step_seconds(self) -> float:
        return self.network.cost_model.time_step_seconds

    def hour_fare(self, t: datetime) -> float:
        return self.network.cost_model.hour_fare(t)

    @property
    def num_customers(self) -> int:
        return len(self.custs)

    @property
    def num_taxis(self) -> int:
        return len(self.taxis)


    def horizon(self, t_start: datetime, t_end: datetime) -> float:
        """Number of time steps in [t_start, t_end] (floored in discrete mode)."""
        n_time = (t_end - t_start) / timedelta(milliseconds=1) / (self.time_step_seconds * 1000)
        if self.discrete_time:
            return float(np.floor(n_time))
        return n_time

    def generate_problem(
        self,
        n_taxis: int,
        demand: float,
        t_start: datetime,
        t_end: datetime,
        rng: np.random.Generator,
    ) -> "Metropolis":
        """
        Generate customers and taxis for the window [t_start, t_end].
        `demand` scales the number of customers. Any previous customers and
        taxis are discarded; on error the previous state is kept.
        """
        if not n_taxis > 0:
            raise InvalidParameterError(f"n_taxis must be positive, got {n_taxis}")
        if not demand > 0:
            raise InvalidParameterError(f"demand must be positive, got {demand}")

        n_time = self.horizon(t_start, t_end)
        if n_time < 1:
            raise HorizonTooSmallError(
                f"Time of simulation too small: {n_time:.3f} time steps "
                f"between {t_start} and {t_end} (step = {self.time_step_seconds} s)"
            )

        net = self.network
        sampler = ZoneSampler(net.width, net.n_sub, rng)
        if self.discrete_time:
            custs = generate_customers_discrete(
                sampler, net.paths, net.cost_model, demand, t_start, int(n_time),
            )
        else:
            custs = generate_customers_continuous(
                sampler, net.paths, net.cost_model, demand, t_start, t_end, n_time,
            )
        taxis = generate_taxis(sampler, n_taxis)

        self.custs = custs
        self.taxis = taxis
        self.n_time = n_time
        self.t_start = t_start
        self.t_end = t_end

        logger.info(
            "Problem generated: %d customers, %d taxis, horizon %.2f steps (%s)",
            len(custs), len(taxis), n_time, "discrete" if self.discrete_time else "continuous",
        )
        return self

    def copy(self) -> "Metropolis":
        """Deep copy: network and run state are independent of self."""
        m = Metropolis(self.network.copy())
        # records are frozen, fresh lists are enough
        m.custs = list(self.custs)
        m.taxis = list(self.taxis)
        m.n_time = self.n_time
        m.t_start = self.t_start
        m.t_end = self.t_end
        return m
