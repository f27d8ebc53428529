#!/usr/bin/env python3
"""Spinfood - CLI entry point for planning one event.

Usage:
    spinfood --participants teilnehmerliste.csv --party partylocation.csv --output schedule.csv
    spinfood --participants teilnehmerliste.csv --party partylocation.csv --seed 42 --stats-output /tmp/stats.json
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from typing import Any

from spinfood.config import ConfigLoader
from spinfood.decision_log import DecisionLogger
from spinfood.errors import SpinfoodError
from spinfood.logging_config import configure_logging, get_logger
from spinfood.pipeline import run_from_files

logger = get_logger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Pair participants and schedule their dinner courses")

    parser.add_argument("--participants", type=str, required=True, help="Participant list CSV")
    parser.add_argument("--party", type=str, required=True, help="Party location CSV")
    parser.add_argument("--output", type=str, help="Write the schedule to this CSV file")
    parser.add_argument("--seed", type=int, help="Random seed for balancing (overrides grouping.random_seed)")
    parser.add_argument("--config", type=str, help="JSON config file with dot-notation keys")
    parser.add_argument("--stats-output", type=str, help="Write JSON stats to this file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser.parse_args(args)


def write_stats_output(stats_file: str, stats: dict[str, Any], success: bool) -> None:
    """Write run statistics to a JSON file."""
    output = {"success": success, **stats}
    with open(stats_file, "w") as f:
        json.dump(output, f, indent=2)
    logger.info(f"Wrote stats to {stats_file}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging("spinfood", debug=args.debug)

    try:
        config = ConfigLoader.initialize(config_path=args.config)
        rng = random.Random(args.seed) if args.seed is not None else None
        decision_logger = DecisionLogger(debug_mode=args.debug)

        result = run_from_files(
            args.participants,
            args.party,
            output_path=args.output,
            config=config,
            rng=rng,
            decision_logger=decision_logger,
        )
    except (SpinfoodError, OSError) as e:
        logger.error(f"Fatal error: {e}")
        if args.stats_output:
            write_stats_output(args.stats_output, {"error": str(e)}, success=False)
        return 1

    stats = result.stats()
    if args.stats_output:
        write_stats_output(args.stats_output, stats, success=True)

    pairs = result.pair_indicators
    groups = result.group_indicators
    print("\nRun complete!")
    print(f"  - Pairs: {pairs.number_of_pairs} ({pairs.number_of_successors} successor participants)")
    print(f"  - Groups: {groups.number_of_groups} ({groups.number_of_successors} successor pairs)")
    print(f"  - Gender deviation (pairs/groups): {pairs.gender_deviation:.3f} / {groups.gender_deviation:.3f}")
    print(f"  - Average route: {groups.average_path_length:.2f} km (std {groups.path_length_std_dev:.2f})")
    if result.output_path:
        print(f"  - Schedule written to {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
