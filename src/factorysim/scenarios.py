"""Scenario runner comparing resource configurations."""


import logging
import os
from typing import Dict, List, Tuple

from factorysim.simulation import Simulation

logger = logging.getLogger(__name__)

# (product type, machines, operators)
DEFAULT_SCENARIOS: List[Tuple[str, int, int]] = [
    ("ProductA", 10, 5),
    ("ProductB", 8, 6),
    ("ProductA", 12, 7),
]


def scenario_filename(product_type, machine_count, operator_count):
    return (
        f"scenario_{product_type}_machines_{machine_count}"
        f"_operators_{operator_count}.txt"
    )


def run_scenario(
    product_type: str,
    machine_count: int,
    operator_count: int,
    horizon: float = 1000.0,
    output_dir: str = ".",
    arrival_rate: float = 1.0,
    **kwargs,
) -> Simulation:
    """Run one scenario and write its report.

    Args:
        product_type: Product type that arrives during the run.
        machine_count: Capacity of "machines".
        operator_count: Capacity of "operators".
        horizon (optional): Run horizon. Defaults to 1000.0.
        output_dir (optional): Directory of the report. Defaults to ".".
        arrival_rate (optional): Arrivals per time unit. Defaults to 1.0.
        **kwargs: Passed to Simulation, e.g. seed.

    Returns:
        Simulation after the run.
    """
    sim = Simulation(
        capacities={"machines": machine_count, "operators": operator_count},
        arrivals={product_type: arrival_rate},
        horizon=horizon,
        name=f"scenario-{product_type}-{machine_count}-{operator_count}",
        **kwargs,
    )
    path = os.path.join(
        output_dir,
        scenario_filename(product_type, machine_count, operator_count),
    )
    sim.run(report_path=path)
    return sim


def run_scenarios(
    scenarios: List[Tuple[str, int, int]] | None = None, **kwargs
) -> Dict[Tuple[str, int, int], Simulation]:
    """Run every scenario, by default `DEFAULT_SCENARIOS`."""
    out = {}
    for scenario in scenarios or DEFAULT_SCENARIOS:
        logger.info(f"Running scenario {scenario}")
        out[scenario] = run_scenario(*scenario, **kwargs)
    return out
