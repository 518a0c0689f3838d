"""
print_fun.py
============
 - tables (pandas) of the generated customers and taxis
 - print of a Metropolis problem
"""

import pandas as pd

from .instance import Metropolis


CUSTOMER_COLUMNS = ["id", "origin", "destination", "call_time", "earliest", "latest", "price"]
TAXI_COLUMNS = ["id", "initial_location", "available_from"]


def customers_to_dataframe(city: Metropolis) -> pd.DataFrame:
    rows = [
        {
            "id": c.id,
            "origin": c.origin,
            "destination": c.destination,
            "call_time": c.call_time,
            "earliest": c.earliest,
            "latest": c.latest,
            "price": c.price,
        }
        for c in city.custs
    ]
    return pd.DataFrame(rows, columns=CUSTOMER_COLUMNS)


def taxis_to_dataframe(city: Metropolis) -> pd.DataFrame:
    rows = [
        {"id": t.id, "initial_location": t.initial_location, "available_from": t.available_from}
        for t in city.taxis
    ]
    return pd.DataFrame(rows, columns=TAXI_COLUMNS)


def print_problem_summary(city: Metropolis, max_rows: int = 10):
    """Pretty-print the content of a Metropolis problem."""
    net = city.network

    print("\n\n" + "=" * 100)
    print("METROPOLIS SUMMARY")
    print("=" * 100)

    # --------------------------------------------------------------
    # CITY
    # --------------------------------------------------------------
    print("\n---> City")
    print(f"  width:                {net.width}")
    print(f"  suburbs:              {net.n_sub} (width {net.sub_width})")
    print(f"  |N| Nodes:            {net.num_nodes}")
    print(f"  |A| Roads:            {net.num_edges}")
    print(f"  time:                 {'discrete' if city.discrete_time else 'continuous'}")

    # --------------------------------------------------------------
    # CONSTANTS
    # --------------------------------------------------------------
    print("\n---> Constants")
    print(f"  step (seconds):       {city.time_step_seconds}")
    print(f"  drive cost (/h):      {city.drive_cost}")
    print(f"  wait cost (/h):       {city.wait_cost}")
    print(f"  waiting cost (/step): {city.waiting_cost:.4f}")

    # --------------------------------------------------------------
    # RUN
    # --------------------------------------------------------------
    print("\n---> Run")
    print(f"  window:               {city.t_start} -> {city.t_end}")
    print(f"  horizon (steps):      {city.n_time}")
    print(f"  |K| Customers:        {city.num_customers}")
    print(f"  |V| Taxis:            {city.num_taxis}")

    if city.custs:
        df = customers_to_dataframe(city)
        print(f"\n---> Customers: first {max_rows}")
        print(df.head(max_rows).to_string(index=False))
        print(f"\n  mean price:           {df['price'].mean():.3f}")
        print(f"  mean window (steps):  {(df['latest'] - df['earliest']).mean():.3f}")

    if city.taxis:
        print(f"\n---> Taxis: first {max_rows}")
        print(taxis_to_dataframe(city).head(max_rows).to_string(index=False))
