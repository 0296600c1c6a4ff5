"""Command line entry point: run the simulator and plot the results."""

import argparse
import logging
import sys

import matplotlib

from .config import SERIES_LABELS, SimulationConfig
from .plot import plot_series
from .simple_hh import SERIES, ConfigurationError, Simulator

logger = logging.getLogger("hhsim")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hhsim",
        description="Single Hodgkin-Huxley neuron, forward Euler integration",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--dt", type=float, help="time step (default 0.001)")
    parser.add_argument("--steps", type=int, help="number of steps (default 200000)")
    parser.add_argument("--output-dir", help="directory for PNG output (default graph)")
    parser.add_argument("--series", nargs="+", choices=SERIES,
                        help="series to plot (default voltage sodium_current)")
    parser.add_argument("--corrected-sodium", action="store_true", default=None,
                        help="use the textbook sodium current g_Na*m^3*h*(V-E_Na)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for progress, -vv for every step")
    return parser


def load_config(args):
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    overrides = {
        "dt": args.dt,
        "step_count": args.steps,
        "output_dir": args.output_dir,
        "series": args.series,
        "corrected_sodium": args.corrected_sodium,
    }
    values = config.to_dict()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return SimulationConfig.from_dict(values)


def main(argv=None):
    args = build_parser().parse_args(argv)
    # files only, no display
    matplotlib.use("Agg")

    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args)
        sim = Simulator(dt=config.dt, step_count=config.step_count,
                        corrected_sodium=config.corrected_sodium)
    except (ConfigurationError, OSError) as e:
        logger.error("%s", e)
        return 2

    sim.run()

    series = sim.series()
    for name in config.series:
        plot_series(series[name], SERIES_LABELS[name], config.output_dir)

    logger.info("Simulation complete: %d steps", sim.current_step)
    return 0


if __name__ == "__main__":
    sys.exit(main())
