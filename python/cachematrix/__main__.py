"""Walk a matrix through the inverse cache from the command line.

Example::

    python -m cachematrix '[[5,7],[0,8]]' --repeat 2
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from . import (
    ShapeError,
    SolveError,
    available_methods,
    last_cache_trace,
    make_cache_matrix,
)

EXIT_OK = 0
EXIT_BAD_INPUT = 2
EXIT_SINGULAR = 3


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m cachematrix",
        description="Invert a square matrix through a CachedInvertible and report cache hits/misses.",
    )
    parser.add_argument("matrix", help="JSON nested list, e.g. '[[4,7],[2,6]]'")
    parser.add_argument("--method", default="auto", choices=available_methods())
    parser.add_argument("--repeat", type=int, default=2, help="How many times to invert the same matrix.")
    parser.add_argument("--verbose", action="store_true", help="Log cache decisions to stderr.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        data = json.loads(args.matrix)
        cm = make_cache_matrix(data)
    except (json.JSONDecodeError, ShapeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    print(cm)
    result = None
    try:
        for _ in range(max(1, args.repeat)):
            result = cm.invert(method=args.method)
            print(f"\n[{last_cache_trace()['event']}] inverse:")
            print(result)

        back = result.invert(method=args.method)
        print(f"\n[{last_cache_trace()['event']}] inverse of the inverse:")
        print(back)
    except SolveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_SINGULAR

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
