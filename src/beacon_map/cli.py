from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from beacon_map.core.engine import AlignmentConfig, AlignmentSession, UnresolvableInputError
from beacon_map.core.parser import ScannerParseError, load_scanners
from beacon_map.report import beacon_count, greatest_manhattan_distance, summarize

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="beacon-map",
        description="Assemble a beacon map from overlapping scanner reports.",
    )
    ap.add_argument("input", type=Path, help="scanner report file")
    ap.add_argument(
        "--part",
        choices=["1", "2", "both"],
        default="both",
        help="1: distinct beacon count, 2: greatest scanner Manhattan distance",
    )
    ap.add_argument("--json", type=Path, default=None, help="write a JSON summary here")
    ap.add_argument("--plot", type=Path, default=None, help="save a 3D scatter of the map here")
    ap.add_argument(
        "--min-overlap",
        type=int,
        default=12,
        help="beacons two scanners must share to be aligned (default: 12)",
    )
    ap.add_argument(
        "--max-rounds",
        type=int,
        default=None,
        help="give up after this many alignment rounds (default: one per scanner)",
    )
    ap.add_argument("--no-cache", action="store_true", help="recompute rotated scanners on demand")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG logging")
    return ap


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = AlignmentConfig(
            min_overlap=args.min_overlap,
            max_rounds=args.max_rounds,
            cache_rotations=not args.no_cache,
        )
        scanners = load_scanners(args.input)
        session = AlignmentSession(scanners, config)
        result = session.run()
    except (ScannerParseError, UnresolvableInputError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.part in ("1", "both"):
        print(beacon_count(result))
    if args.part in ("2", "both"):
        print(greatest_manhattan_distance(result.scanner_map))

    if args.json is not None:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(summarize(result), indent=2))
        logger.info("wrote %s", args.json)

    if args.plot is not None:
        import matplotlib.pyplot as plt

        from beacon_map.viz.plot import plot_beacon_map

        args.plot.parent.mkdir(parents=True, exist_ok=True)
        ax = plot_beacon_map(result, title=args.input.name)
        ax.figure.savefig(args.plot)
        plt.close(ax.figure)
        logger.info("wrote %s", args.plot)

    return 0
