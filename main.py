import argparse
import logging
import sys

from factorysim.scenarios import run_scenarios
from factorysim.simulation import Simulation

logging.basicConfig(
    stream=sys.stdout,
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)-7s - %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Factory simulation")
    parser.add_argument("--config", help="Factory configuration YAML-file")
    parser.add_argument("--horizon", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--report", default="simulation_log.txt")
    parser.add_argument("--events", help="Export dispatched events as CSV")
    parser.add_argument(
        "--scenarios",
        action="store_true",
        help="Run the default resource scenarios instead",
    )
    parser.add_argument("--output-dir", default=".")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.scenarios:
        kwargs = {"output_dir": args.output_dir, "seed": args.seed}
        if args.horizon is not None:
            kwargs["horizon"] = args.horizon
        run_scenarios(**kwargs)
        return 0

    logger.info("Starting simulation")
    overrides = {} if args.seed is None else {"seed": args.seed}
    if args.config:
        sim = Simulation.from_config(args.config, **overrides)
    else:
        sim = Simulation(**overrides)
    sim.run(args.horizon, report_path=args.report)
    if args.events:
        sim.export(args.events, exporter="csv")
    return 0


if __name__ == "__main__":
    sys.exit(main())
