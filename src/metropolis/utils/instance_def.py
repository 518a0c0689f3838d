"""
Records of a generated taxi problem: customers (trip requests) and taxis.

Times are expressed in time steps from the start of the simulated window.
"""

from dataclasses import dataclass


Node = int


@dataclass(frozen=True)
class Customer:
    id: int
    origin: Node
    destination: Node
    call_time: float     # when the request is made
    earliest: float      # earliest pick-up time
    latest: float        # latest pick-up time
    price: float         # fare paid for the trip


@dataclass(frozen=True)
class Taxi:
    id: int
    initial_location: Node
    available_from: float = 0.0
