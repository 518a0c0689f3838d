from datetime import datetime

from metropolis import Metropolis, cost_model_from_cfg, make_rng
from metropolis.utils.config import DEFAULT_COST_CFG, configure_logging
from metropolis.utils.print_fun import print_problem_summary



COST_CFG = dict(DEFAULT_COST_CFG)


if __name__ == "__main__":

    configure_logging()

    ### Seed
    seed = 23
    rng = make_rng(seed)

    # ----------------
    # Params
    # ----------------
    width = 8            # side of the main city
    n_sub = 4            # number of suburbs
    discrete_time = True

    n_taxis = 20
    demand = 1.0
    t_start = datetime(2016, 1, 1, 8, 0, 0)
    t_end = datetime(2016, 1, 1, 9, 0, 0)

    # 1) network, built once
    city = Metropolis.build(
        width, n_sub, rng,
        discrete_time=discrete_time,
        cost_model=cost_model_from_cfg(COST_CFG),
    )

    # 2) one run = one copy of the city
    for run in range(3):
        run_city = city.copy().generate_problem(n_taxis, demand, t_start, t_end, rng)
        print_problem_summary(run_city)
