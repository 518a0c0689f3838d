from datetime import timedelta

import pytest

from metropolis import (
    CostModel,
    DegenerateZoneError,
    HorizonTooSmallError,
    InvalidParameterError,
    Metropolis,
    MetropolisNetwork,
    make_rng,
)
from metropolis.data_generation.generate_network import loc_zone
from metropolis.utils.shortest_paths import shortest_paths


def check_problem(city):
    n = city.network.num_nodes
    assert [c.id for c in city.custs] == list(range(1, len(city.custs) + 1))
    for c in city.custs:
        assert 0 <= c.call_time <= c.earliest <= c.latest <= city.n_time
        assert c.price >= 0
        assert c.origin != c.destination
        assert 1 <= c.origin <= n and 1 <= c.destination <= n
    for k, taxi in enumerate(city.taxis, start=1):
        assert taxi.id == k
        assert 1 <= taxi.initial_location <= n
        assert taxi.available_from == 0


def test_two_phase_build(rng):
    network = MetropolisNetwork.build(4, 1, rng, discrete_time=True)
    city = Metropolis(network)
    assert city.custs == [] and city.taxis == []
    assert city.n_time == 0
    assert city.graph is network.graph
    assert network.num_nodes == 20
    assert network.sub_width == 2
    assert network.loc_to_coord(network.coord_to_loc(2, 1, 1)) == (2, 1, 1)


def test_constants(discrete_city, t_start):
    assert discrete_city.drive_cost == 30.0
    assert discrete_city.wait_cost == 10.0
    assert discrete_city.time_step_seconds == 30.0
    assert discrete_city.waiting_cost == pytest.approx(10 * 30 / 3600)
    assert discrete_city.hour_fare(t_start) == 150.0
    assert discrete_city.discrete_time


def test_end_to_end_discrete(rng, t_start):
    city = Metropolis.build(4, 1, rng, discrete_time=True)
    assert city.network.num_nodes == 20
    assert city.network.num_edges == 58

    city.generate_problem(10, 1.0, t_start, t_start + timedelta(seconds=20 * 30), rng)
    assert city.n_time == 20
    assert city.num_taxis == 10
    check_problem(city)
    assert all(c.earliest == int(c.earliest) for c in city.custs)

    # same seed, same city and same customers
    rng_again = make_rng(23)
    again = Metropolis.build(4, 1, rng_again, discrete_time=True)
    again.generate_problem(10, 1.0, t_start, t_start + timedelta(seconds=20 * 30), rng_again)
    assert again.road_time == city.road_time
    assert again.num_customers == city.num_customers
    assert again.custs == city.custs
    assert [t.initial_location for t in again.taxis] == [t.initial_location for t in city.taxis]


def test_end_to_end_continuous(continuous_city, rng, t_start):
    continuous_city.generate_problem(5, 2.0, t_start, t_start + timedelta(minutes=45), rng)
    assert continuous_city.n_time == pytest.approx(90)
    assert continuous_city.num_customers > 0
    check_problem(continuous_city)


def test_same_seed_same_problem(t_start):
    t_end = t_start + timedelta(hours=1)
    problems = []
    for _ in range(2):
        rng = make_rng(7)
        city = Metropolis.build(5, 2, rng, discrete_time=True)
        city.generate_problem(8, 1.5, t_start, t_end, rng)
        problems.append(city)
    assert problems[0].road_time == problems[1].road_time
    assert problems[0].custs == problems[1].custs
    assert problems[0].taxis == problems[1].taxis


def test_horizon(discrete_city, continuous_city, t_start):
    assert discrete_city.horizon(t_start, t_start + timedelta(seconds=75)) == 2
    assert continuous_city.horizon(t_start, t_start + timedelta(seconds=75)) == pytest.approx(2.5)


def test_regeneration_replaces_state(discrete_city, rng, t_start):
    discrete_city.generate_problem(10, 1.0, t_start, t_start + timedelta(hours=1), rng)
    first_custs = discrete_city.custs
    discrete_city.generate_problem(3, 1.0, t_start, t_start + timedelta(minutes=10), rng)
    assert discrete_city.custs is not first_custs
    assert discrete_city.num_taxis == 3
    assert discrete_city.n_time == 20
    check_problem(discrete_city)


def test_horizon_too_small_keeps_state(discrete_city, rng, t_start):
    discrete_city.generate_problem(10, 1.0, t_start, t_start + timedelta(minutes=20), rng)
    custs, taxis, n_time = discrete_city.custs, discrete_city.taxis, discrete_city.n_time

    with pytest.raises(HorizonTooSmallError):
        discrete_city.generate_problem(10, 1.0, t_start, t_start + timedelta(seconds=29), rng)
    with pytest.raises(HorizonTooSmallError):
        discrete_city.generate_problem(10, 1.0, t_start, t_start - timedelta(minutes=5), rng)

    assert discrete_city.custs is custs
    assert discrete_city.taxis is taxis
    assert discrete_city.n_time == n_time


def test_horizon_too_small_on_empty_city(continuous_city, rng, t_start):
    with pytest.raises(HorizonTooSmallError):
        continuous_city.generate_problem(1, 1.0, t_start, t_start + timedelta(seconds=10), rng)
    assert continuous_city.custs == []
    assert continuous_city.taxis == []


@pytest.mark.parametrize(
    "n_taxis,demand",
    [(0, 1.0), (-2, 1.0), (float("nan"), 1.0), (5, 0.0), (5, -1.0), (5, float("nan"))],
)
def test_invalid_generation_params(discrete_city, rng, t_start, n_taxis, demand):
    with pytest.raises(InvalidParameterError):
        discrete_city.generate_problem(n_taxis, demand, t_start, t_start + timedelta(hours=1), rng)
    assert discrete_city.custs == []


def test_invalid_city_params(rng):
    with pytest.raises(InvalidParameterError):
        Metropolis.build(0, 2, rng)
    with pytest.raises(InvalidParameterError):
        Metropolis.build(4, -1, rng)


def test_single_node_city_fails_on_trip(rng, t_start):
    city = Metropolis.build(1, 0, rng)
    with pytest.raises(DegenerateZoneError):
        city.generate_problem(1, 1.0, t_start, t_start + timedelta(minutes=5), rng)
    assert city.custs == []


def test_taxis_without_suburbs(rng, t_start):
    city = Metropolis.build(4, 0, rng, discrete_time=True)
    city.generate_problem(50, 1.0, t_start, t_start + timedelta(minutes=5), rng)
    assert all(loc_zone(t.initial_location, 4) == 0 for t in city.taxis)


def test_taxis_spread_over_zones(rng, t_start):
    city = Metropolis.build(4, 2, rng, discrete_time=True)
    city.generate_problem(400, 1.0, t_start, t_start + timedelta(minutes=5), rng)
    in_city = sum(loc_zone(t.initial_location, 4) == 0 for t in city.taxis)
    assert 140 < in_city < 260


def test_copy_is_independent(discrete_city, rng, t_start):
    discrete_city.generate_problem(10, 1.0, t_start, t_start + timedelta(hours=1), rng)
    n_custs = discrete_city.num_customers
    arc = next(iter(discrete_city.road_time))
    time = discrete_city.road_time[arc]

    clone = discrete_city.copy()
    assert clone.custs == discrete_city.custs
    assert clone.graph is not discrete_city.graph
    assert clone.paths is not discrete_city.paths

    clone.custs.append(clone.custs[0])
    clone.taxis.clear()
    clone.road_time[arc] = 999.0
    clone.graph.remove_edge(*arc)
    clone.paths.times[1, 2] = -1.0

    assert discrete_city.num_customers == n_custs
    assert discrete_city.num_taxis == 10
    assert discrete_city.road_time[arc] == time
    assert discrete_city.graph.has_edge(*arc)
    assert discrete_city.paths.times[1, 2] >= 0


def test_copy_then_generate(discrete_city, rng, t_start):
    discrete_city.generate_problem(4, 1.0, t_start, t_start + timedelta(hours=1), rng)
    custs = list(discrete_city.custs)
    clone = discrete_city.copy()
    clone.generate_problem(6, 2.0, t_start, t_start + timedelta(hours=2), rng)
    assert discrete_city.custs == custs
    assert discrete_city.num_taxis == 4
    assert clone.num_taxis == 6


def test_custom_cost_model_and_oracle(rng, t_start):
    calls = []

    def recording_builder(G, road_time, road_cost):
        calls.append(G.number_of_nodes())
        return shortest_paths(G, road_time, road_cost)

    cm = CostModel(drive_cost=60.0, time_step_seconds=60.0, fare_per_hour=120.0)
    city = Metropolis.build(4, 1, rng, discrete_time=True, cost_model=cm, paths_builder=recording_builder)
    assert calls == [20]
    for (u, v), t in city.road_time.items():
        assert city.road_cost[(u, v)] == pytest.approx(t)

    city.generate_problem(2, 1.0, t_start, t_start + timedelta(hours=1), rng)
    assert city.n_time == 60
    for c in city.custs:
        assert c.price == pytest.approx(2.0 * round(city.paths.traveltime(c.origin, c.destination)))


@pytest.mark.parametrize("discrete_time", [True, False])
def test_negative_fare_rejected_during_generation(rng, t_start, discrete_time):
    cm = CostModel(fare_fn=lambda t: -10.0)
    city = Metropolis.build(4, 1, rng, discrete_time=discrete_time, cost_model=cm)
    with pytest.raises(InvalidParameterError):
        city.generate_problem(3, 1.0, t_start, t_start + timedelta(hours=1), rng)
    assert city.custs == []
    assert city.taxis == []
    assert city.n_time == 0
