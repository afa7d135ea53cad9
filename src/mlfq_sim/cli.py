"""Command-line entry point — run a workload and print the trace.

Usage::

    mlfq-sim                       # built-in three-process workload
    mlfq-sim workload.json         # processes and config from a file
    mlfq-sim --reset-mode crossing --quiet
    mlfq-sim --preset bounded-top  # a configuration that demotes
    mlfq-sim --log-level info      # also dump the simulation log

Validation errors are reported on stderr with exit status 2; nothing is
simulated in that case.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from mlfq_sim.config import PRESETS, InvalidConfigurationError, MLFQConfig, ResetMode
from mlfq_sim.console import ConsolePrinter, format_metrics
from mlfq_sim.logging import Logger, LogLevel
from mlfq_sim.process import InvalidProcessSpecError
from mlfq_sim.simulator import Simulator
from mlfq_sim.workload import Workload, load_workload

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``mlfq-sim``."""
    parser = argparse.ArgumentParser(
        prog="mlfq-sim",
        description="Simulate a multi-level feedback queue CPU scheduler.",
    )
    parser.add_argument(
        "workload",
        nargs="?",
        type=Path,
        help="JSON workload file (default: built-in three-process workload)",
    )
    parser.add_argument(
        "--preset",
        choices=PRESETS,
        help="replace the workload's levels and reset period with a built-in configuration",
    )
    parser.add_argument(
        "--reset-mode",
        choices=[mode.value for mode in ResetMode],
        help="override when the periodic priority reset fires",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="print only the metrics summary, not the event trace",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name.lower() for level in LogLevel],
        help="print simulation log entries at or above this level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the simulation described by *argv* and return an exit status."""
    args = build_parser().parse_args(argv)
    try:
        workload = load_workload(args.workload) if args.workload else Workload.default()
        if args.preset is not None:
            workload = dataclasses.replace(workload, config=MLFQConfig.preset(args.preset))
        if args.reset_mode is not None:
            config = dataclasses.replace(workload.config, reset_mode=ResetMode(args.reset_mode))
            workload = dataclasses.replace(workload, config=config)
    except (InvalidConfigurationError, InvalidProcessSpecError) as e:
        print(f"mlfq-sim: {e}", file=sys.stderr)  # noqa: T201
        return EXIT_USAGE

    logger = Logger()
    observers = [] if args.quiet else [ConsolePrinter()]
    simulator = Simulator.from_workload(workload, observers=observers, logger=logger)
    result = simulator.run()

    print()  # noqa: T201
    print(format_metrics(result.metrics))  # noqa: T201
    if args.log_level is not None:
        print()  # noqa: T201
        for entry in logger.filter(min_level=LogLevel[args.log_level.upper()]):
            print(entry)  # noqa: T201
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
