"""
Life universe benchmark CLI.

Times several quadtree/grid Life implementations on random maps or on an
RLE pattern and prints one comparison report per input.

Usage:
    python main_benchmark.py                        # random maps
    python main_benchmark.py --seed 1234 --maps 3
    python main_benchmark.py -p glider.rle -u hash memo
    python main_benchmark.py -p - < pattern.rle     # pattern on stdin

Warning: with the default iteration count this runs for a long time and
the tree caches grow without bound; stop it with Ctrl-C.
"""

import argparse
import logging
import sys

from benchmark_harness import (
    ITERATIONS,
    MAP_MAX_SIDE,
    MAP_MIN_SIDE,
    MAPS_QUANTITY,
    PRINT_EVERY,
    BenchmarkConfig,
    benchmark_pattern,
    format_report,
    run_map_benchmarks,
)
from rle_decoder import MalformedPatternError
from universes import DEFAULT_UNIVERSES, UNIVERSES

logger = logging.getLogger(__name__)

EXIT_MALFORMED_PATTERN = 10
EXIT_ABORTED = 130


def build_parser():
    parser = argparse.ArgumentParser(
        description="Benchmark Life universe implementations against random maps or an RLE pattern."
    )
    parser.add_argument(
        "-u", "--universe",
        dest="universes",
        nargs="+",
        choices=list(UNIVERSES),
        default=list(DEFAULT_UNIVERSES),
        help="Universes to time, in report order (default: %(default)s).",
    )
    parser.add_argument(
        "-p", "--pattern",
        help="RLE pattern file to benchmark instead of random maps ('-' reads standard input).",
    )
    parser.add_argument("--iterations", type=int, default=ITERATIONS,
                        help="Generations per universe (default: %(default)s).")
    parser.add_argument("--print-every", type=int, default=PRINT_EVERY,
                        help="Log progress every N generations (default: %(default)s).")
    parser.add_argument("--maps", type=int, default=MAPS_QUANTITY,
                        help="Number of random maps (default: %(default)s).")
    parser.add_argument("--min-side", type=int, default=MAP_MIN_SIDE,
                        help="Smallest map side, inclusive (default: %(default)s).")
    parser.add_argument("--max-side", type=int, default=MAP_MAX_SIDE,
                        help="Largest map side, exclusive (default: %(default)s).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for map generation (default: random, logged at start).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging.")
    return parser


def read_pattern(parser, path):
    try:
        if path == "-":
            return sys.stdin.read().splitlines()
        with open(path, 'r', encoding='utf-8') as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        parser.error(f"cannot read pattern {path}: {e}")


def main(argv=None) -> int:
    """Run the benchmark CLI.

    Returns:
        0 on success, 10 on a malformed pattern, 130 when interrupted.
        Usage errors exit with status 2 through argparse.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = BenchmarkConfig(
            iterations=args.iterations,
            print_every=args.print_every,
            maps_quantity=args.maps,
            map_min_side=args.min_side,
            map_max_side=args.max_side,
            seed=args.seed,
            universes=tuple(args.universes),
        )
    except ValueError as e:
        parser.error(str(e))

    lines = read_pattern(parser, args.pattern) if args.pattern else None

    try:
        if lines is not None:
            result = benchmark_pattern(lines, config, label=f"Pattern {args.pattern}")
            print(format_report(result))
        else:
            run_map_benchmarks(config)
    except MalformedPatternError as e:
        logger.error("pattern rejected: %s", e)
        print(f"error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_MALFORMED_PATTERN
    except KeyboardInterrupt:
        print("\naborted.", file=sys.stderr)
        return EXIT_ABORTED

    return 0


if __name__ == "__main__":
    sys.exit(main())
