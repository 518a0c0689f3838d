from datetime import datetime

import pytest

from metropolis import Metropolis, make_rng


@pytest.fixture
def rng():
    return make_rng(23)


@pytest.fixture
def t_start():
    return datetime(2016, 1, 1, 8, 0, 0)


@pytest.fixture
def discrete_city(rng):
    return Metropolis.build(4, 1, rng, discrete_time=True)


@pytest.fixture
def continuous_city(rng):
    return Metropolis.build(4, 2, rng, discrete_time=False)
