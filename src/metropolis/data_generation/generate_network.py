"""
Network Generator
=================

Creates the road network of a METROPOLIS: one main square city and
`n_sub` square suburbs of half its width.

Location ids go from 1 to N = width^2 + n_sub * sub_width^2:
    - main city (zone 0): ids 1 .. width^2
    - suburb c  (zone c): the next sub_width^2 ids, suburb after suburb

Roads:
    1. GRID roads inside every square (4-neighbours, both directions,
       short-hop travel time)
    2. ANCHOR roads: corner (1,1) of each suburb <-> a random node on the
       border of the main city (long-hop travel time)
    3. RING roads: suburb c corner (1, sub_width) <-> suburb c+1 corner
       (sub_width, 1), the last suburb closing the ring (short-hop time)

Every road is created in both directions and each direction gets its own
travel time sample. The result is strongly connected.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import networkx as nx
import numpy as np

from .cost_model import CostModel
from ..utils.errors import InvalidParameterError


logger = logging.getLogger(__name__)

Node = int
Arc = Tuple[Node, Node]



def sub_width_of(width: int) -> int:
    return width // 2


def num_locations(width: int, n_sub: int) -> int:
    return width ** 2 + n_sub * sub_width_of(width) ** 2


def coord_to_loc(i: int, j: int, zone: int, width: int) -> Node:
    """
    Location id of coordinates (i, j) (1-based row, column) in a zone.
    Zone 0 is the main city, zones 1..n_sub the suburbs.
    """
    if zone == 0:
        return j + (i - 1) * width
    sub_width = sub_width_of(width)
    return width ** 2 + (zone - 1) * sub_width ** 2 + j + (i - 1) * sub_width


def loc_to_coord(loc: Node, width: int) -> Tuple[int, int, int]:
    """Inverse of coord_to_loc: returns (i, j, zone)."""
    if loc < 1:
        raise InvalidParameterError(f"Location ids start at 1, got {loc}")

    if loc <= width ** 2:
        i, j = divmod(loc - 1, width)
        return i + 1, j + 1, 0

    sub_width = sub_width_of(width)
    zone, rest = divmod(loc - width ** 2 - 1, sub_width ** 2)
    i, j = divmod(rest, sub_width)
    return i + 1, j + 1, zone + 1


def loc_zone(loc: Node, width: int) -> int:
    return loc_to_coord(loc, width)[2]


def anchor_coord(side: int, offset: int, width: int) -> Tuple[int, int]:
    """
    Coordinates of a node on the border of the main city.
    Sides are walked clockwise: 1 = top, 2 = right, 3 = bottom, 4 = left.
    """
    if side == 1:
        return 1, offset
    if side == 2:
        return offset, width
    if side == 3:
        return width, width - offset + 1
    return width - offset + 1, 1


def validate_network_params(width: int, n_sub: int) -> None:
    if width <= 0:
        raise InvalidParameterError(f"width must be positive, got {width}")
    if n_sub < 0:
        raise InvalidParameterError(f"n_sub must be non-negative, got {n_sub}")
    if n_sub > 0 and width < 2:
        # sub_width would be 0 and the main city has no border offset to anchor to
        raise InvalidParameterError(f"suburbs need width >= 2, got width={width}")



#######################
# METROPOLIS GENERATOR:
#######################

class _RoadWriter:
    """Adds roads to the graph and records their travel time and cost."""

    def __init__(self, G: nx.DiGraph, cost_model: CostModel, rng: np.random.Generator, discrete: bool):
        self.G = G
        self.cost_model = cost_model
        self.rng = rng
        self.discrete = discrete
        self.road_time: Dict[Arc, float] = {}
        self.road_cost: Dict[Arc, float] = {}

    def add_road(self, a: Node, b: Node, long_hop: bool = False) -> None:
        # one independent sample per direction
        for u, v in ((a, b), (b, a)):
            if long_hop:
                tt = self.cost_model.long_hop_time(self.rng, self.discrete)
            else:
                tt = self.cost_model.short_hop_time(self.rng, self.discrete)
            cost = self.cost_model.travel_cost(tt)
            self.G.add_edge(u, v, time=tt, cost=cost)
            self.road_time[(u, v)] = tt
            self.road_cost[(u, v)] = cost

    def add_square(self, side: int, start: int) -> None:
        """Grid of side x side nodes, ids start+1 .. start+side^2."""

        def node_id(i: int, j: int) -> Node:
            return start + j + (i - 1) * side

        for i in range(1, side):
            for j in range(1, side + 1):
                self.add_road(node_id(i, j), node_id(i + 1, j))    # vertical
                self.add_road(node_id(j, i), node_id(j, i + 1))    # horizontal


def choose_anchors(width: int, n_sub: int, rng: np.random.Generator) -> List[Tuple[int, int]]:
    """
    One random (side, offset) per suburb, sorted clockwise along the border.
    """
    anchors = [
        (int(rng.integers(1, 5)), int(rng.integers(1, width)))
        for _ in range(n_sub)
    ]
    anchors.sort(key=lambda x: (x[0] - 1) * width + x[1])
    return anchors


def generate_metropolis_network(
    width: int,
    n_sub: int,
    rng: np.random.Generator,
    cost_model: CostModel | None = None,
    discrete_time: bool = False,
) -> Tuple[nx.DiGraph, Dict[Arc, float], Dict[Arc, float]]:
    """
    Generate the METROPOLIS network.

    Parameters:
        width : int
            Number of nodes per side of the main city.
        n_sub : int
            Number of suburbs (each of side width // 2).
        rng : np.random.Generator
            Random source for all travel time samples.
        cost_model : CostModel
            Converts travel times to costs (default rates if None).
        discrete_time : bool
            Integer travel times if True, real ones otherwise.

    Returns:
        G, road_time, road_cost
            Directed graph (edge attributes "time" and "cost") and the
            sparse (u, v) -> time / cost mappings.
    """
    validate_network_params(width, n_sub)
    if cost_model is None:
        cost_model = CostModel()

    sub_width = sub_width_of(width)
    n_locs = num_locations(width, n_sub)

    G = nx.DiGraph()
    G.add_nodes_from(range(1, n_locs + 1))
    roads = _RoadWriter(G, cost_model, rng, discrete_time)

    ### Main city + suburbs ###
    roads.add_square(width, 0)
    for sub in range(1, n_sub + 1):
        roads.add_square(sub_width, width ** 2 + (sub - 1) * sub_width ** 2)

    ### Link every suburb to the main city ###
    anchors = choose_anchors(width, n_sub, rng)
    for sub, (side, offset) in enumerate(anchors, start=1):
        i, j = anchor_coord(side, offset, width)
        logger.debug("suburb %d anchored to main city node (%d, %d)", sub, i, j)
        roads.add_road(coord_to_loc(1, 1, sub, width), coord_to_loc(i, j, 0, width), long_hop=True)

    ### Link suburbs between them (ring) ###
    for sub in range(1, n_sub):
        roads.add_road(
            coord_to_loc(1, sub_width, sub, width),
            coord_to_loc(sub_width, 1, sub + 1, width),
        )
    if n_sub > 1:
        roads.add_road(
            coord_to_loc(1, sub_width, n_sub, width),
            coord_to_loc(sub_width, 1, 1, width),
        )

    logger.info(
        "Metropolis network built: width=%d n_sub=%d -> %d nodes, %d edges",
        width, n_sub, G.number_of_nodes(), G.number_of_edges(),
    )
    return G, roads.road_time, roads.road_cost
