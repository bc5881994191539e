#!/usr/bin/env python3
"""
Command-line entry point for the E91 QKD simulation.

Run with:   e91-qkd --pairs 1000 --seed 42
            python -m e91_qkd.cli --preset "High Statistics" --json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import CoreParameters
from .config_validator import InvalidArgumentError
from .logging_config import LOG_LEVELS, setup_logging
from .models import SimulationConfig
from .presets import get_preset_config, list_presets
from .protocol import E91Protocol
from .reporting import ConsoleReporter, LoggingReporter

logger = logging.getLogger("e91_qkd.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="E91 quantum key distribution simulation")
    p.add_argument("--pairs", type=int, default=None,
                   help=f"Number of entangled pairs (default {CoreParameters.NUM_PAIRS_DEFAULT})")
    p.add_argument("--seed", type=int, default=None,
                   help="Random seed; omit for a fresh entropy-drawn seed")
    p.add_argument("--preset", choices=list_presets(), default=None,
                   help="Named configuration; --pairs/--seed override it")
    p.add_argument("--json", action="store_true", help="Print a JSON summary instead of the console report")
    p.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    p.add_argument("--plot", metavar="PATH", default=None, help="Save the results figure to PATH")
    p.add_argument("--csv", metavar="PATH", default=None, help="Write the trial history to PATH as CSV")
    p.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING",
                   help="Logging level (default WARNING)")
    return p


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    config = get_preset_config(args.preset) if args.preset else SimulationConfig()
    if args.pairs is not None:
        config.num_pairs = args.pairs
    if args.seed is not None:
        config.seed = args.seed
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    config = config_from_args(args)
    observers = [LoggingReporter(level=logging.DEBUG)]
    console = None
    if not args.json:
        console = ConsoleReporter(color=not args.no_color and sys.stdout.isatty())
        observers.append(console)

    try:
        protocol = E91Protocol(config, observers=observers)
    except InvalidArgumentError as e:
        logger.error("%s", e)
        return 1

    if console is not None:
        console.print_banner()
    results = protocol.run()

    if args.json:
        print(json.dumps(results.summary(), indent=2))

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from .visualization import create_results_plots
        create_results_plots(results).savefig(args.plot, dpi=150)
        logger.info("Saved results figure to %s", args.plot)

    if args.csv:
        from .analysis import trials_to_dataframe
        trials_to_dataframe(results.trials).to_csv(args.csv, index=False)
        logger.info("Wrote %d trials to %s", results.num_pairs, args.csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
